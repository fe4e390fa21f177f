# Matched case-insensitively as substrings of title + description.
BLACKLISTED_PHRASES = [
    # Scam indicators
    "wire transfer",
    "western union",
    "money order",
    "payment upfront",
    "easy money",
    "work from home opportunity",
    "get rich quick",
    "earn $$",
    "earn $$$",
    "earn money fast",
    # Adult content
    "escort",
    "adult service",
    "massage therapy",
    "special service",
    # Common spam patterns
    "no experience needed",
    "urgent opportunity",
    "act now",
    "limited time offer",
    "exclusive offer",
    "guaranteed income",
    "investment opportunity",
    # Suspicious pricing
    "free iphone",
    "free macbook",
    "free laptop",
    "below market",
    "way below market",
    # Crypto
    "crypto opportunity",
    "bitcoin investment",
    "crypto mining",
    "nft opportunity",
    # MLM / pyramid schemes
    "be your own boss",
    "multilevel",
    "multi level",
    "pyramid",
    "downline",
    "upline",
    # Job scams
    "secret shopper",
    "mystery shopper",
    "data entry job",
    "typing job",
    "work at home mom",
]


def find_blacklisted(text: str) -> list[str]:
    lowered = text.lower()
    return [phrase for phrase in BLACKLISTED_PHRASES if phrase in lowered]
