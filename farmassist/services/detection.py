"""
Query classification for the advice engine.

Detects the language a farmer wrote in (Hindi in Devanagari or romanized
form, otherwise English) and the agricultural topics the question touches.
Pure functions: no I/O, no state.
"""

from __future__ import annotations
import re
from typing import List, Tuple

from ..models import Language, Topic

_DEVANAGARI = re.compile(r"[ऀ-ॿ]")

# Romanized Hindi markers common in typed farmer questions
_ROMAN_HINDI = re.compile(r"\b(kya|kaise|kab|kis|hai|kheti|pani|beej|mitti|kisan)\b", re.IGNORECASE)

# Table order is the order topics are reported in
TOPIC_KEYWORDS: Tuple[Tuple[Topic, Tuple[str, ...]], ...] = (
    (Topic.PESTS, (
        "pest", "insect", "keet", "disease", "fung", "blight", "bimari",
        "कीट", "रोग",
    )),
    (Topic.WATER, (
        "water", "irrigation", "rain", "pani", "sinchai", "drip", "moisture",
        "पानी", "सिंचाई",
    )),
    (Topic.FERTILIZER, (
        "fertilizer", "fertiliser", "nutrient", "khad", "urea", "manure", "compost",
        "खाद", "उर्वरक",
    )),
    (Topic.WEATHER, (
        "weather", "forecast", "rain", "temperature", "climate", "monsoon", "mausam", "barish",
        "मौसम", "बारिश",
    )),
    (Topic.MARKET, (
        "price", "market", "mandi", "bazar", "kimat", "mulya", "sell",
        "मंडी", "भाव", "कीमत",
    )),
)


def detect_language(query: str) -> Language:
    """
    Return Language.HINDI for Devanagari text or romanized Hindi markers.

    Examples:
        >>> detect_language("गेहूं में कौन सी खाद डालें?")
        <Language.HINDI: 'hindi'>
        >>> detect_language("kheti ke liye pani kab dena hai")
        <Language.HINDI: 'hindi'>
        >>> detect_language("When should I irrigate wheat?")
        <Language.ENGLISH: 'english'>
    """
    text = query or ""
    if _DEVANAGARI.search(text) or _ROMAN_HINDI.search(text.lower()):
        return Language.HINDI
    return Language.ENGLISH


def detect_topics(query: str) -> List[Topic]:
    """All topics with at least one keyword contained in the lowercased query."""
    q = (query or "").lower()
    return [topic for topic, words in TOPIC_KEYWORDS if any(w in q for w in words)]


def detect(query: str) -> Tuple[List[Topic], Language]:
    return detect_topics(query), detect_language(query)
