"""
Canned replies, health tips and the problem lookup table used by the chatbot
"""
from typing import NamedTuple, Tuple

GREETING_REPLY = "Hi, I am your Virtual Doctor. Tell me your health problem?"
THANKS_REPLY = "You're welcome!"
FAREWELL_REPLY = "Goodbye!"
TIP_REPLY = "Here is a health tip for you: {tip}"
PROBLEM_REPLY = "Solution for {keyword}: {solution}. Medicine: {medicine}."
FALLBACK_REPLY = "Sorry, I don't have a solution for your problem."


class Problem(NamedTuple):
    """A health problem the bot knows how to answer"""
    keyword: str
    solution: str
    medicine: str


HEALTH_TIPS: Tuple[str, ...] = (
    "Drink plenty of water throughout the day to stay hydrated.",
    "Get at least 7-8 hours of sleep every night for optimal health.",
    "Incorporate fruits and vegetables into your daily meals.",
    "Exercise for at least 30 minutes a day to stay fit.",
    "Take breaks from screen time to avoid eye strain.",
    "Practice mindfulness and stress-relieving activities.",
    "Avoid smoking and limit alcohol consumption for better health.",
    "Wash your hands regularly to prevent infections.",
    "Maintain a balanced diet with the right nutrients.",
    "Stay active and maintain a healthy weight.",
)

# Matching walks this tuple front to back; the first hit wins.
PROBLEMS: Tuple[Problem, ...] = (
    Problem(
        keyword="headache",
        solution="You should take rest, avoid screen time, and stay hydrated.",
        medicine="You can take paracetamol or ibuprofen for relief.",
    ),
    Problem(
        keyword="fever",
        solution="Make sure to rest, drink plenty of fluids, and monitor your temperature.",
        medicine="You can take acetaminophen or ibuprofen to reduce fever.",
    ),
    Problem(
        keyword="cough",
        solution="Drink warm liquids, rest, and avoid cold environments.",
        medicine="You can take cough syrup or lozenges for relief.",
    ),
    Problem(
        keyword="stomach ache",
        solution="Rest, avoid spicy foods, and drink plenty of water.",
        medicine="You can take antacids or pain relievers like ibuprofen.",
    ),
)
