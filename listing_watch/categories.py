from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    label: str
    section: str
    code: str


CATEGORIES: dict[str, Category] = {
    # For Sale
    "antiques": Category("Antiques", "For Sale", "ata"),
    "appliances": Category("Appliances", "For Sale", "ppa"),
    "arts-crafts": Category("Arts & Crafts", "For Sale", "ara"),
    "auto-parts": Category("Auto Parts", "For Sale", "pta"),
    "baby-kids": Category("Baby & Kid", "For Sale", "baa"),
    "beauty-hlth": Category("Beauty & Health", "For Sale", "haa"),
    "bikes": Category("Bikes", "For Sale", "bia"),
    "boats": Category("Boats", "For Sale", "boo"),
    "books": Category("Books", "For Sale", "bka"),
    "cars-trucks": Category("Cars & Trucks", "For Sale", "cta"),
    "electronics": Category("Electronics", "For Sale", "ela"),
    "furniture": Category("Furniture", "For Sale", "fua"),
    # Housing
    "apts-housing": Category("Apartments & Housing", "Housing", "apa"),
    "rooms": Category("Rooms & Shares", "Housing", "roo"),
    "sublets": Category("Sublets & Temporary", "Housing", "sub"),
    "vacation-rentals": Category("Vacation Rentals", "Housing", "vac"),
    "parking-storage": Category("Parking & Storage", "Housing", "prk"),
    "office-commercial": Category("Office & Commercial", "Housing", "off"),
    "real-estate": Category("Real Estate For Sale", "Housing", "rea"),
    # Jobs
    "accounting": Category("Accounting & Finance", "Jobs", "acc"),
    "admin": Category("Admin & Office", "Jobs", "ofc"),
    "arch-engineering": Category("Architect & Engineering", "Jobs", "egr"),
    "art-media-design": Category("Art & Media", "Jobs", "med"),
    "biotech-science": Category("Biotech & Science", "Jobs", "sci"),
    "business": Category("Business & Mgmt", "Jobs", "bus"),
    "customer-service": Category("Customer Service", "Jobs", "csr"),
    "education": Category("Education", "Jobs", "edu"),
    "food-bev-hosp": Category("Food & Hospitality", "Jobs", "fbh"),
    "general-labor": Category("General Labor", "Jobs", "lab"),
    "government": Category("Government", "Jobs", "gov"),
    "healthcare": Category("Healthcare", "Jobs", "hea"),
    "legal": Category("Legal", "Jobs", "lgl"),
    "manufacturing": Category("Manufacturing", "Jobs", "mnu"),
    "marketing": Category("Marketing & PR", "Jobs", "mar"),
    "nonprofit": Category("Nonprofit", "Jobs", "npo"),
    "real-estate-jobs": Category("Real Estate", "Jobs", "rej"),
    "retail": Category("Retail", "Jobs", "ret"),
    "sales": Category("Sales", "Jobs", "sls"),
    "salon-spa-fitness": Category("Salon & Spa", "Jobs", "spa"),
    "security": Category("Security", "Jobs", "sec"),
    "skilled-trades": Category("Skilled Trades", "Jobs", "trd"),
    "software": Category("Software & QA", "Jobs", "sof"),
    "systems-network": Category("Systems & Network", "Jobs", "sad"),
    "technical-support": Category("Technical Support", "Jobs", "tch"),
    "transport": Category("Transport", "Jobs", "trp"),
    "tv-film-video": Category("TV, Film, & Video", "Jobs", "tfr"),
    "web-html-info-design": Category("Web & Info Design", "Jobs", "web"),
    "writing-editing": Category("Writing & Editing", "Jobs", "wri"),
    # Services
    "automotive": Category("Automotive", "Services", "aos"),
    "beauty": Category("Beauty", "Services", "bts"),
    "computer": Category("Computer", "Services", "cps"),
    "creative": Category("Creative", "Services", "crs"),
    "event": Category("Event", "Services", "evs"),
    "financial": Category("Financial", "Services", "fns"),
    "legal-services": Category("Legal", "Services", "lgs"),
    "lessons": Category("Lessons", "Services", "lss"),
    "pet": Category("Pet", "Services", "pts"),
}

SUPPORTED_CITIES = frozenset({
    # Northeast
    "newyork", "boston", "philadelphia", "washingtondc", "baltimore",
    "pittsburgh", "buffalo", "albany",
    # Midwest
    "chicago", "detroit", "cleveland", "minneapolis", "milwaukee", "stlouis",
    "cincinnati", "indianapolis",
    # South
    "atlanta", "miami", "dallas", "houston", "austin", "nashville",
    "charlotte", "neworleans", "tampa", "orlando",
    # West
    "sfbay", "losangeles", "seattle", "portland", "sacramento", "sandiego",
    "sanjose", "fresno", "phoenix", "lasvegas", "albuquerque", "tucson",
    "elpaso", "denver", "saltlakecity", "boise", "coloradosprings",
    # Canada
    "toronto", "montreal", "ottawa", "calgary", "edmonton", "winnipeg",
    "vancouver",
})

RESULTS_PER_ALERT = {
    "free": 5,
    "mid": 20,
    "pro": 100,
}


def is_valid_category(key: str) -> bool:
    return key in CATEGORIES


def category_code(key: str) -> str:
    """Return the Craigslist search path code for a category key."""
    return CATEGORIES[key].code


def results_cap(plan: str) -> int:
    return RESULTS_PER_ALERT.get(plan, RESULTS_PER_ALERT["free"])
