"""
Canned academic recommendations used when the recommendation service is
unavailable and USE_STATIC_FALLBACK is enabled.

Topics are matched by keyword against the lower-cased query, first match wins.
"""
from typing import List, Tuple

from bookfinder.models import Recommendation

TOPIC_RECOMMENDATIONS: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("psychology", "mental health", "cognitive"), [
        "Cognitive Psychology by Robert J. Sternberg (Cengage, 2017)",
        "The Handbook of Social Psychology by Susan Fiske (Wiley, 2010)",
        "Abnormal Psychology by Ronald Comer (Worth Publishers, 2019)",
    ]),
    (("computer", "programming", "algorithm"), [
        "Introduction to Algorithms by Thomas Cormen (MIT Press, 2009)",
        "Computer Networks by Andrew Tanenbaum (Pearson, 2021)",
        "Artificial Intelligence: A Modern Approach by Stuart Russell (Pearson, 2020)",
    ]),
    (("business", "economics", "finance"), [
        "Principles of Economics by N. Gregory Mankiw (Cengage, 2020)",
        "Strategic Management by Fred David (Pearson, 2019)",
        "Corporate Finance by Ross, Westerfield & Jaffe (McGraw-Hill, 2018)",
    ]),
    (("history", "politics", "government"), [
        "A History of Modern Political Thought by Iain Hampsher-Monk (Blackwell, 1992)",
        "The Oxford History of the World by J.M. Roberts (Oxford, 2013)",
        "Comparative Politics by Gabriel Almond (Pearson, 2015)",
    ]),
    (("literature", "english", "writing"), [
        "The Norton Anthology of English Literature by Stephen Greenblatt (Norton, 2018)",
        "Literary Theory: An Introduction by Terry Eagleton (University of Minnesota Press, 2008)",
        "The Craft of Research by Wayne Booth (University of Chicago Press, 2016)",
    ]),
    (("science", "research", "method"), [
        "The Structure of Scientific Revolutions by Thomas Kuhn (University of Chicago Press, 1996)",
        "Research Design: Qualitative, Quantitative, and Mixed Methods by John Creswell (SAGE, 2017)",
        "Introduction to Scientific Research Methods in Geography by Basil Gomez (Wiley, 2019)",
    ]),
    (("philosophy", "ethics", "logic"), [
        "The Problems of Philosophy by Bertrand Russell (Oxford, 1997)",
        "Nicomachean Ethics by Aristotle (Hackett, 2019)",
        "A Concise Introduction to Logic by Patrick Hurley (Cengage, 2016)",
    ]),
    (("math", "statistics", "calculus"), [
        "Calculus: Early Transcendentals by James Stewart (Cengage, 2020)",
        "Introduction to Mathematical Statistics by Robert Hogg (Pearson, 2019)",
        "Linear Algebra and Its Applications by David Lay (Pearson, 2015)",
    ]),
]

DEFAULT_RECOMMENDATIONS = [
    "The Craft of Research by Wayne Booth (University of Chicago Press, 2016)",
    "A Manual for Writers by Kate Turabian (University of Chicago Press, 2018)",
    "The Academic Life by Steven Brint (Cambridge University Press, 2019)",
]

TOPIC_SEARCH_TERMS: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("psychology",), ["psychological research", "cognitive science", "behavioral studies"]),
    (("computer", "programming"), ["computer science textbooks", "software engineering", "algorithms and data structures"]),
    (("business", "economics"), ["business administration", "economic theory", "management studies"]),
    (("history",), ["historical analysis", "historiography", "historical research methods"]),
    (("literature", "english"), ["literary criticism", "comparative literature", "rhetoric and composition"]),
    (("philosophy",), ["philosophical inquiry", "ethics and moral philosophy", "logic and reasoning"]),
    (("science",), ["scientific methodology", "research methods", "peer-reviewed studies"]),
    (("math",), ["mathematical analysis", "applied mathematics", "statistical methods"]),
]

DEFAULT_SEARCH_TERMS = ["academic textbooks", "scholarly publications", "university press"]

def _match(query: str, table, default: List[str]) -> List[str]:
    lower = query.lower()
    for keywords, values in table:
        if any(k in lower for k in keywords):
            return list(values)
    return list(default)

def fallback_recommendations(query: str) -> List[str]:
    return _match(query, TOPIC_RECOMMENDATIONS, DEFAULT_RECOMMENDATIONS)

def fallback_search_terms(query: str) -> List[str]:
    """The query itself followed by topic terms, three at most."""
    return ([query] + _match(query, TOPIC_SEARCH_TERMS, DEFAULT_SEARCH_TERMS))[:3]

def fallback_recommendation(query: str) -> Recommendation:
    return Recommendation(
        enhanced_query=query,
        recommendations=fallback_recommendations(query),
        search_terms=fallback_search_terms(query),
    )
