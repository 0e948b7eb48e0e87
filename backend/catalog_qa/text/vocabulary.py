"""Stoplists, protected catalog vocabulary and bilingual cue tokens."""

from __future__ import annotations

ENGLISH_STOPWORDS: frozenset[str] = frozenset(
    """
    a about above after again against all am an and any are aren't as at
    be because been before being below between both but by
    can't cannot could couldn't did didn't do does doesn't doing don't down during
    each few for from further
    had hadn't has hasn't have haven't having he he'd he'll he's her here here's hers herself
    him himself his how how's
    i i'd i'll i'm i've if in into is isn't it it's its itself
    let's
    me more most mustn't my myself
    no nor not of off on once only or other ought our ours ourselves out over own
    same shan't she she'd she'll she's should shouldn't so some such
    than that that's the their theirs them themselves then there there's these they they'd
    they'll they're they've this those through to too
    under until up very
    was wasn't we we'd we'll we're we've were weren't what what's when when's where where's
    which while who who's whom why why's with won't would wouldn't
    you you'd you'll you're you've your yours yourself yourselves
    """.split()
)

# Hindi written in Latin script.
HINGLISH_STOPWORDS: frozenset[str] = frozenset(
    """
    hai hain ho hona hoga hogi honge hote hota thi tha the
    kya kyu kyun kyunki kisi kis kaun konsa kab kaha kahaan kaise
    nahi nahin na mat bas sirf bhi hi to tho ab abhi phir fir
    ye yeh vo woh aisa waisa jab tab agar lekin magar par per ya aur
    ka ki ke mein me mai mei mujhe mujhko hume humko tumhe aap ap hum tum
    se ko tak pe liye
    kr kar karo karna karke krke krna hogaya chahiye chahie krdo kardo de do lo le dena lena
    """.split()
)

HINDI_STOPWORDS: frozenset[str] = frozenset(
    """
    है हैं हो होना होगा होगी होंगे होते होता था थी थे
    क्या क्यों क्योंकि किसी कौन कौनसा कब कहाँ कैसे
    नहीं मत बस सिर्फ भी ही तो अब अभी फिर
    यह ये वह वो जब तब अगर लेकिन मगर या और
    का की के में मे मुझे हमें तुम्हें आप हम तुम
    से को तक पर लिए चाहिए कर करो करना करके दें लो
    """.split()
)

STOPLISTS: tuple[frozenset[str], ...] = (ENGLISH_STOPWORDS, HINGLISH_STOPWORDS, HINDI_STOPWORDS)

# Catalog terms that must survive stopword filtering. Entries may contain
# separators; the normalizer protects each token they produce.
PROTECTED_TERMS: tuple[str, ...] = (
    # company and brands
    "hari", "chand", "anand", "anil", "hca", "hari-chand-anand",
    "duke", "duke-jia", "dukejia", "duki", "jia", "kansai", "special", "highlead", "merrow",
    "megasew", "amf", "reece", "vios", "fk", "group",
    # contact and catalog fields
    "contact", "call", "email", "address", "branches", "headquarters", "head office",
    "factory", "works", "website", "whatsapp", "whats app", "phone",
    "brand", "brands", "names", "name", "features", "feature", "specification",
    "specifications", "specs", "model", "models", "type", "types", "descriptions",
    "description", "applications", "application", "machine_id", "machine id", "id",
    "needle", "niddle", "heads", "head", "speed", "rpm", "embroidery area", "phase", "phases",
    # regions
    "delhi", "india", "bangladesh", "ethiopia",
    # domains and industries
    "automation", "solution", "solutions", "garment", "leather", "mattress",
    "perforation", "embroidery", "quilting", "sewing", "upholstery", "pattern",
    # attachments and techniques
    "sequin", "sequins", "bead", "beads", "cording", "coiling", "taping", "rhinestone",
    "chenille", "chainstitch", "cap", "tubular",
    # control systems and file formats
    "dahao", "a18", "dst", "tajima", "usb", "u-disk", "lcd", "touchscreen", "network",
    # features, safety and mechanics
    "auto-trimming", "automatic-trimming", "auto-color-change", "automatic-color-change",
    "thread-break-detection", "power-failure-recovery", "servo", "servo-motor", "36v",
    "36v-dc", "oil-mist", "dust-clean", "wide-voltage", "270-cap-frame",
    # machine models
    "es-1300", "halo-100", "dy-601ctm", "dy-606", "dy-606h", "dy-606hc", "dy-606l",
    "dy-606xl", "dy-606s", "dy-606+1ct", "dy-606+1pd", "dy-606+6", "dy-602", "dy-602h",
    "dy-602hc", "dy-602l", "dy-602xl", "dy-602s", "dy-602+1ct", "dy-602+1pd", "dy602+2",
    "dy-908", "dy-912", "dy915-120", "dy918-120", "dy-915", "dy-918",
    "dy-1201", "dy-1201l", "dy-1201h", "dy-1201xl", "dy-1201s", "dy-1201+1ct", "dy-1201+1pd",
    "dy-1202", "dy-1202l", "dy-1202h", "dy-1202hc", "dy-1202xl", "dy-1202s", "dy-1203h",
    "dy-1204", "dy-1206", "dy-1206h", "dy-1206hc", "dy-1502",
    "duke-single-head", "duke-multi-head", "multihead", "dukejia-single-head", "dukejia-multi-head",
    "dy-cs3000", "dy-pe750x600", "dy-sk-d2-2.0rh",
)

# Tokens that suggest a romanized-Hindi reply; each one counts once.
MIXED_MODE_TOKENS: tuple[str, ...] = (
    "hai", "hain", "tha", "thi", "the", "kya", "kyu", "kyun", "kyunki", "kisi", "kis", "kaun",
    "kab", "kaha", "kahaan", "kaise", "nahi", "nahin", "ka", "ki", "ke", "mein", "me", "mai",
    "mei", "hum", "ap", "aap", "tum", "kr", "kar", "karo", "karna", "chahiye", "bhi", "sirf",
    "jaldi", "kitna", "ho", "hoga", "hogaya", "krdo", "pls", "plz", "yaar", "shukriya",
    "dhanyavaad", "dhanyavad",
)

DEVANAGARI_RANGE = ("\u0900", "\u097f")

__all__ = [
    "ENGLISH_STOPWORDS",
    "HINGLISH_STOPWORDS",
    "HINDI_STOPWORDS",
    "STOPLISTS",
    "PROTECTED_TERMS",
    "MIXED_MODE_TOKENS",
    "DEVANAGARI_RANGE",
]
