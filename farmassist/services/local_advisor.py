"""
Rule-based farming advice used when the generative provider is unavailable.

Keyword table -> category -> canned response pool, with separate Hindi and
English pools. Deterministic classification, pseudo-random pick inside the
pool (seedable for tests). No network and no failure modes.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models import Language
from .detection import detect_language

GENERAL = "general"

GREETING = "I'm here to help with your farming questions. What would you like to know?"

# First category with a matching keyword wins, in this order.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("weather", ("weather", "rain", "temperature", "climate", "forecast", "monsoon",
                 "drought", "mausam", "barish", "मौसम", "बारिश")),
    ("market", ("price", "market", "mandi", "sell", "bazar", "kimat", "mulya",
                "मंडी", "भाव", "कीमत")),
    ("pests", ("pest", "insect", "disease", "fung", "weed", "blight", "keet",
               "bimari", "कीट", "रोग")),
    ("soil", ("soil", "nutrient", "fertiliz", "fertilis", "compost", "manure", "urea",
              "khad", "mitti", "मिट्टी", "खाद")),
    ("irrigation", ("water", "irrigat", "drip", "sprinkler", "moisture", "canal",
                    "pani", "sinchai", "पानी", "सिंचाई")),
    ("crops", ("crop", "seed", "harvest", "sowing", "cultivat", "yield", "beej",
               "fasal", "बीज", "फसल")),
)

RESPONSES: Dict[str, Dict[Language, List[str]]] = {
    "weather": {
        Language.ENGLISH: [
            "Weather information is crucial for your crops. Check the meteorological department forecast before irrigating or spraying.",
            "Harvest during dry spells where possible; grain and produce collected wet spoil faster in storage.",
            "Protect young plants from extreme heat or heavy rain with shade nets, mulch or temporary covers.",
        ],
        Language.HINDI: [
            "मौसम की जानकारी आपकी फसल के लिए महत्वपूर्ण है। सिंचाई या छिड़काव से पहले मौसम विभाग का पूर्वानुमान देखें।",
            "जहाँ तक हो सके सूखे मौसम में कटाई करें, गीली उपज भंडारण में जल्दी खराब होती है।",
            "तेज गर्मी या भारी बारिश से छोटे पौधों को बचाने के लिए छाया जाल या मल्च का उपयोग करें।",
        ],
    },
    "market": {
        Language.ENGLISH: [
            "Market prices change regularly. Compare rates at nearby mandis or on the agricultural market portal before you sell.",
            "Staggering your sales over a few weeks reduces the risk of selling everything at a seasonal low.",
            "Clean, graded and well-dried produce usually fetches a better price at the mandi.",
        ],
        Language.HINDI: [
            "बाजार भाव नियमित रूप से बदलते रहते हैं। बेचने से पहले आस-पास की मंडियों के भाव की तुलना करें।",
            "पूरी उपज एक साथ न बेचें, कुछ हफ्तों में बेचने से कम भाव का जोखिम घटता है।",
            "साफ, छंटाई की हुई और अच्छी तरह सूखी उपज को मंडी में बेहतर भाव मिलता है।",
        ],
    },
    "pests": {
        Language.ENGLISH: [
            "Integrated Pest Management (IPM) combines biological, cultural and chemical methods. Use chemical pesticides only as a last resort.",
            "Inspect your fields regularly; catching pests and disease early keeps control cheap and effective.",
            "Beneficial insects such as ladybirds and lacewings help keep pest populations down naturally.",
        ],
        Language.HINDI: [
            "एकीकृत कीट प्रबंधन (IPM) अपनाएं। रासायनिक कीटनाशकों का उपयोग अंतिम विकल्प के रूप में करें।",
            "फसल की नियमित जांच करें और कीट या रोग के शुरुआती लक्षणों पर ध्यान दें।",
            "मित्र कीट जैसे लेडीबर्ड कीटों की संख्या को प्राकृतिक रूप से नियंत्रित करते हैं।",
        ],
    },
    "soil": {
        Language.ENGLISH: [
            "Regular soil testing shows nutrient needs and pH so fertilizer is applied only where it pays.",
            "Adding organic matter such as compost or farmyard manure improves soil structure and fertility.",
            "Cover crops protect soil from erosion and return nutrients between main seasons.",
        ],
        Language.HINDI: [
            "मिट्टी की नियमित जांच से पोषक तत्वों की जरूरत और pH का पता चलता है।",
            "कम्पोस्ट या गोबर की खाद मिलाने से मिट्टी की संरचना और उर्वरता सुधरती है।",
            "आवरण फसलें मिट्टी को कटाव से बचाती हैं और पोषक तत्व लौटाती हैं।",
        ],
    },
    "irrigation": {
        Language.ENGLISH: [
            "Drip irrigation delivers water straight to the roots and saves water compared with flooding.",
            "Irrigate early in the morning or in the evening to reduce evaporation losses.",
            "Mulching keeps soil moist for longer and reduces how often you need to irrigate.",
        ],
        Language.HINDI: [
            "ड्रिप सिंचाई से पानी सीधे जड़ों तक पहुंचता है और पानी की बचत होती है।",
            "वाष्पीकरण कम करने के लिए सुबह जल्दी या शाम को सिंचाई करें।",
            "मल्चिंग से मिट्टी में नमी लंबे समय तक बनी रहती है।",
        ],
    },
    "crops": {
        Language.ENGLISH: [
            "Crop rotation maintains soil fertility and breaks pest and disease cycles.",
            "Use certified seed suited to your region and season for a reliable stand.",
            "Legumes in the rotation fix nitrogen and reduce fertilizer needs for the next crop.",
        ],
        Language.HINDI: [
            "फसल चक्र अपनाने से मिट्टी की उर्वरता बनी रहती है और कीट-रोग का चक्र टूटता है।",
            "अपने क्षेत्र और मौसम के अनुसार प्रमाणित बीज का उपयोग करें।",
            "दलहनी फसलें नाइट्रोजन स्थिर करती हैं और अगली फसल में खाद की जरूरत घटाती हैं।",
        ],
    },
    GENERAL: {
        Language.ENGLISH: [
            "1. Conduct soil testing to know the nutrient needs of your field.\n2. Follow crop rotation to maintain soil fertility.\n3. Irrigate at the right time and in the right amount for your crop.",
            "1. Choose certified, high-quality seed.\n2. Sow on time according to the recommended calendar for your region.\n3. Monitor regularly and use integrated pest management.",
            "1. Keep records of your farm operations to improve next season's decisions.\n2. Use organic manures to keep soil healthy.\n3. Join a local farmer group to share equipment and knowledge.",
        ],
        Language.HINDI: [
            "1. मिट्टी की जांच करें, इससे उत्पादकता बढ़ाने में मदद मिलती है।\n2. फसल चक्र अपनाएं।\n3. सही समय पर उचित मात्रा में सिंचाई करें।",
            "1. प्रमाणित उन्नत बीज चुनें।\n2. फसल के अनुसार सही समय पर बुवाई करें।\n3. नियमित निरीक्षण और एकीकृत कीट प्रबंधन अपनाएं।",
            "1. मौसम पूर्वानुमान के अनुसार कृषि कार्य की योजना बनाएं।\n2. जैविक खाद का उपयोग करें।\n3. फसल का नियमित निरीक्षण करें।",
        ],
    },
}

for _category, _pools in RESPONSES.items():
    for _language in Language:
        assert _pools.get(_language), f"empty response pool: {_category}/{_language.value}"


@dataclass(frozen=True)
class LocalAdvice:
    category: str
    text: str


def categorize(query: str) -> str:
    """
    First category whose keywords appear in the query, else "general".

    Examples:
        >>> categorize("What pesticide should I use for rice blast?")
        'pests'
        >>> categorize("Tell me something useful")
        'general'
    """
    q = (query or "").lower()
    for category, words in CATEGORY_KEYWORDS:
        if any(w in q for w in words):
            return category
    return GENERAL


class LocalAdvisor:
    """Canned-response advisor. Pass a seeded random.Random for reproducible picks."""

    model_name = "local-rules"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def respond(self, query: str, language: Optional[Language] = None) -> LocalAdvice:
        if not (query or "").strip():
            return LocalAdvice(category=GENERAL, text=GREETING)

        category = categorize(query)
        pool = RESPONSES[category][language or detect_language(query)]
        return LocalAdvice(category=category, text=self._rng.choice(pool))
