"""
Static content pools for daily challenges and tips.

Entries are flattened in category order and given the id
"<category>_<index-within-category>". Entries may be appended to a category,
but existing entries must never be reordered or replaced: the daily
selections already shown to users are recomputed from these positions.
"""

from typing import Dict, List, Tuple

from exceptions import ConfigurationError
from models import ContentEntry

CHALLENGE_POOL: Dict[str, List[dict]] = {
    "recycling": [
        {"title": "Recycle all plastic waste generated today", "points": 15, "difficulty": "medium", "icon": "♻️"},
        {"title": "Separate and recycle paper, plastic, and glass", "points": 20, "difficulty": "hard", "icon": "🗑️"},
        {"title": "Clean and recycle 5 items before disposal", "points": 10, "difficulty": "easy", "icon": "🧼"},
        {"title": "Find a recycling center for electronic waste", "points": 15, "difficulty": "medium", "icon": "🔌"},
        {"title": "Compost your organic kitchen waste", "points": 12, "difficulty": "easy", "icon": "🌿"},
    ],
    "transportation": [
        {"title": "Use public transport or cycle for one trip", "points": 10, "difficulty": "easy", "icon": "🚲"},
        {"title": "Walk or bike to your destination today", "points": 15, "difficulty": "medium", "icon": "🚶"},
        {"title": "Carpool with friends or colleagues", "points": 12, "difficulty": "easy", "icon": "🚗"},
        {"title": "Avoid using a car for the entire day", "points": 25, "difficulty": "hard", "icon": "🛑"},
        {"title": "Take stairs instead of elevator 3 times", "points": 8, "difficulty": "easy", "icon": "🪜"},
    ],
    "consumption": [
        {"title": "Use a reusable water bottle instead of plastic", "points": 10, "difficulty": "easy", "icon": "💧"},
        {"title": "Bring your own shopping bag", "points": 8, "difficulty": "easy", "icon": "🛍️"},
        {"title": "Choose products with minimal packaging", "points": 12, "difficulty": "medium", "icon": "📦"},
        {"title": "Buy local or organic produce", "points": 15, "difficulty": "medium", "icon": "🥬"},
        {"title": "Avoid single-use plastics for the day", "points": 20, "difficulty": "hard", "icon": "🚫"},
        {"title": "Use a reusable coffee cup or mug", "points": 10, "difficulty": "easy", "icon": "☕"},
    ],
    "energy": [
        {"title": "Turn off lights in unused rooms", "points": 8, "difficulty": "easy", "icon": "💡"},
        {"title": "Unplug devices when not in use", "points": 10, "difficulty": "easy", "icon": "🔌"},
        {"title": "Take a 5-minute shower to save water", "points": 12, "difficulty": "medium", "icon": "🚿"},
        {"title": "Air-dry clothes instead of using dryer", "points": 15, "difficulty": "medium", "icon": "👕"},
        {"title": "Use natural light instead of artificial lighting", "points": 10, "difficulty": "easy", "icon": "☀️"},
    ],
    "awareness": [
        {"title": "Learn about one endangered species", "points": 10, "difficulty": "easy", "icon": "🐼"},
        {"title": "Share an eco-tip with 3 friends", "points": 12, "difficulty": "medium", "icon": "📢"},
        {"title": "Watch a documentary about sustainability", "points": 15, "difficulty": "medium", "icon": "📺"},
        {"title": "Research eco-friendly alternatives for daily products", "points": 10, "difficulty": "easy", "icon": "🔍"},
        {"title": "Join an online environmental community", "points": 12, "difficulty": "easy", "icon": "🌍"},
    ],
    "food": [
        {"title": "Have one plant-based meal today", "points": 12, "difficulty": "easy", "icon": "🥗"},
        {"title": "Avoid food waste - finish all meals", "points": 10, "difficulty": "easy", "icon": "🍽️"},
        {"title": "Cook at home instead of ordering takeout", "points": 15, "difficulty": "medium", "icon": "👨‍🍳"},
        {"title": "Buy imperfect produce to reduce waste", "points": 12, "difficulty": "easy", "icon": "🥕"},
        {"title": "Meal prep to reduce packaging waste", "points": 15, "difficulty": "medium", "icon": "🍱"},
    ],
}

# Tips carry no points or difficulty; "tip" is the title, "emoji" the icon.
TIP_POOL: Dict[str, List[dict]] = {
    "waste_reduction": [
        {"tip": "Bring your own reusable bag when shopping 🛍️", "emoji": "🛍️"},
        {"tip": "Use a reusable water bottle instead of single-use plastic 💧", "emoji": "💧"},
        {"tip": "Say no to plastic straws - use metal or bamboo alternatives 🥤", "emoji": "🥤"},
        {"tip": "Carry reusable cutlery to avoid disposable utensils 🍴", "emoji": "🍴"},
        {"tip": "Use beeswax wraps instead of plastic wrap for food storage 🐝", "emoji": "🐝"},
        {"tip": "Buy products with minimal or recyclable packaging 📦", "emoji": "📦"},
        {"tip": "Refuse receipts when possible - go digital! 🧾", "emoji": "🧾"},
        {"tip": "Use a reusable coffee cup for your daily brew ☕", "emoji": "☕"},
        {"tip": "Donate old clothes instead of throwing them away 👕", "emoji": "👕"},
        {"tip": "Compost food scraps to reduce landfill waste 🌱", "emoji": "🌱"},
        {"tip": "Use cloth napkins instead of paper ones 🍽️", "emoji": "🍽️"},
        {"tip": "Buy in bulk to reduce packaging waste 🏪", "emoji": "🏪"},
        {"tip": "Repair items instead of replacing them 🔧", "emoji": "🔧"},
    ],
    "energy_saving": [
        {"tip": "Turn off lights when leaving a room 💡", "emoji": "💡"},
        {"tip": "Unplug electronics when not in use to avoid phantom power 🔌", "emoji": "🔌"},
        {"tip": "Use LED bulbs - they use 75% less energy than traditional bulbs 💡", "emoji": "💡"},
        {"tip": "Set your thermostat 2 degrees lower in winter, higher in summer 🌡️", "emoji": "🌡️"},
        {"tip": "Use natural light during the day instead of artificial lighting ☀️", "emoji": "☀️"},
        {"tip": "Air dry clothes instead of using a dryer when possible 👔", "emoji": "👔"},
        {"tip": "Take shorter showers to save hot water and energy 🚿", "emoji": "🚿"},
        {"tip": "Use a laptop instead of a desktop - it uses less energy 💻", "emoji": "💻"},
        {"tip": "Close curtains at night to keep heat in during winter 🏠", "emoji": "🏠"},
        {"tip": "Use a power strip to easily turn off multiple devices at once ⚡", "emoji": "⚡"},
        {"tip": "Run dishwashers and washing machines only when full 🧺", "emoji": "🧺"},
        {"tip": "Use cold water for laundry - it saves energy and protects colors 🌊", "emoji": "🌊"},
        {"tip": "Keep your refrigerator between 37-40°F for optimal efficiency ❄️", "emoji": "❄️"},
    ],
    "sustainable_shopping": [
        {"tip": "Choose products made from recycled materials ♻️", "emoji": "♻️"},
        {"tip": "Buy local produce to reduce carbon footprint from transport 🥕", "emoji": "🥕"},
        {"tip": "Support eco-friendly and certified sustainable brands 🌿", "emoji": "🌿"},
        {"tip": "Choose products with Forest Stewardship Council (FSC) certification 🌲", "emoji": "🌲"},
        {"tip": "Buy second-hand items when possible - reduce, reuse! 🏷️", "emoji": "🏷️"},
        {"tip": "Avoid fast fashion - choose quality over quantity 👗", "emoji": "👗"},
        {"tip": "Look for cruelty-free and vegan product certifications 🐰", "emoji": "🐰"},
        {"tip": "Choose products without palm oil to protect rainforests 🌴", "emoji": "🌴"},
        {"tip": "Buy organic when possible to reduce pesticide use 🍎", "emoji": "🍎"},
        {"tip": "Support businesses with transparent supply chains 🔍", "emoji": "🔍"},
        {"tip": "Choose refillable products over single-use ones 🔄", "emoji": "🔄"},
        {"tip": "Shop at farmers markets for fresh, local goods 🧺", "emoji": "🧺"},
    ],
    "transportation": [
        {"tip": "Walk or bike for short trips instead of driving 🚶", "emoji": "🚶"},
        {"tip": "Use public transportation when possible 🚌", "emoji": "🚌"},
        {"tip": "Carpool with colleagues or friends to reduce emissions 🚗", "emoji": "🚗"},
        {"tip": "Plan your errands to minimize driving distance 🗺️", "emoji": "🗺️"},
        {"tip": "Keep your car tires properly inflated for better fuel efficiency 🛞", "emoji": "🛞"},
        {"tip": "Consider an electric or hybrid vehicle for your next car 🔋", "emoji": "🔋"},
        {"tip": "Work from home when possible to eliminate commute emissions 🏡", "emoji": "🏡"},
        {"tip": "Combine trips to reduce overall vehicle use 📍", "emoji": "📍"},
        {"tip": "Use bike-sharing or scooter-sharing services 🛴", "emoji": "🛴"},
        {"tip": "Avoid idling your car - turn it off if waiting more than 30 seconds 🚦", "emoji": "🚦"},
    ],
    "food_habits": [
        {"tip": "Eat more plant-based meals to reduce your carbon footprint 🥗", "emoji": "🥗"},
        {"tip": "Reduce food waste by meal planning 📝", "emoji": "📝"},
        {"tip": "Store food properly to extend its shelf life 🥫", "emoji": "🥫"},
        {"tip": "Use leftovers creatively instead of throwing them away 🍲", "emoji": "🍲"},
        {"tip": "Buy imperfect produce - it tastes the same and reduces waste 🥔", "emoji": "🥔"},
        {"tip": "Freeze food before it spoils to use later ❄️", "emoji": "❄️"},
        {"tip": "Choose seasonal produce - it's fresher and more sustainable 🍓", "emoji": "🍓"},
        {"tip": "Start a small herb garden at home 🌿", "emoji": "🌿"},
        {"tip": "Bring reusable containers for restaurant leftovers 📦", "emoji": "📦"},
        {"tip": "Support sustainable fishing by choosing certified seafood 🐟", "emoji": "🐟"},
        {"tip": "Reduce meat consumption - try Meatless Mondays 🥦", "emoji": "🥦"},
    ],
    "water_conservation": [
        {"tip": "Fix leaky faucets - a drip can waste gallons per day 💧", "emoji": "💧"},
        {"tip": "Turn off the tap while brushing your teeth 🪥", "emoji": "🪥"},
        {"tip": "Collect rainwater for watering plants 🌧️", "emoji": "🌧️"},
        {"tip": "Use a broom instead of a hose to clean driveways 🧹", "emoji": "🧹"},
        {"tip": "Install low-flow showerheads to reduce water use 🚿", "emoji": "🚿"},
        {"tip": "Water plants in the morning or evening to reduce evaporation 🌱", "emoji": "🌱"},
        {"tip": "Use a dishwasher instead of hand washing - it uses less water 🍽️", "emoji": "🍽️"},
        {"tip": "Choose drought-resistant plants for your garden 🌵", "emoji": "🌵"},
        {"tip": "Reuse pasta or vegetable cooking water for plants 🍝", "emoji": "🍝"},
        {"tip": "Take a bucket shower and use the water for cleaning 🪣", "emoji": "🪣"},
    ],
    "recycling": [
        {"tip": "Rinse containers before recycling to avoid contamination ♻️", "emoji": "♻️"},
        {"tip": "Know your local recycling rules - not all plastics are accepted 🔍", "emoji": "🔍"},
        {"tip": "Remove caps and lids from bottles before recycling 🧴", "emoji": "🧴"},
        {"tip": "Recycle electronics properly at designated e-waste centers 📱", "emoji": "📱"},
        {"tip": "Flatten cardboard boxes to save space in recycling bins 📦", "emoji": "📦"},
        {"tip": "Recycle batteries at special collection points 🔋", "emoji": "🔋"},
        {"tip": "Don't bag recyclables - keep them loose in the bin 🗑️", "emoji": "🗑️"},
        {"tip": "Recycle glass bottles and jars - they can be recycled infinitely 🍾", "emoji": "🍾"},
        {"tip": "Shred paper documents before recycling for security 📄", "emoji": "📄"},
        {"tip": "Check product labels for recycling symbols and instructions ♻️", "emoji": "♻️"},
    ],
    "eco_habits": [
        {"tip": "Use digital documents instead of printing when possible 📱", "emoji": "📱"},
        {"tip": "Choose eco-friendly cleaning products 🧽", "emoji": "🧽"},
        {"tip": "Plant a tree or support reforestation projects 🌳", "emoji": "🌳"},
        {"tip": "Educate others about sustainable living 📚", "emoji": "📚"},
        {"tip": "Join local environmental cleanup events 🧹", "emoji": "🧹"},
        {"tip": "Support environmental organizations and causes 💚", "emoji": "💚"},
        {"tip": "Use reusable batteries or rechargeable ones 🔋", "emoji": "🔋"},
        {"tip": "Avoid single-use items whenever possible 🚫", "emoji": "🚫"},
        {"tip": "Choose bar soap over liquid soap to reduce plastic 🧼", "emoji": "🧼"},
        {"tip": "Use a reusable lunch box instead of disposable bags 🍱", "emoji": "🍱"},
        {"tip": "Switch to eco-friendly menstrual products 🌸", "emoji": "🌸"},
        {"tip": "Make your own cleaning products with natural ingredients 🍋", "emoji": "🍋"},
        {"tip": "Participate in citizen science projects for the environment 🔬", "emoji": "🔬"},
        {"tip": "Use a bamboo toothbrush instead of plastic 🪥", "emoji": "🪥"},
        {"tip": "Vote for politicians who prioritize environmental policies 🗳️", "emoji": "🗳️"},
    ],
}

# Short list pushed as the noon "Eco Tip of the Day" broadcast.
BROADCAST_TIPS: Tuple[str, ...] = (
    "♻️ Bring your own reusable bag when shopping to reduce plastic waste!",
    "💡 Switch to LED bulbs - they use 75% less energy than traditional bulbs!",
    "🚰 Fix leaky faucets to save up to 3,000 gallons of water per year!",
    "🌱 Start composting kitchen scraps to reduce landfill waste by 30%!",
    "🚲 Bike or walk for short trips instead of driving to reduce emissions!",
    "☕ Use a reusable water bottle - save 167 plastic bottles per year!",
    "🌍 Buy local produce to reduce transportation emissions!",
    "🔌 Unplug electronics when not in use to cut phantom power consumption!",
    "🌿 Plant a tree - it absorbs 48 lbs of CO₂ per year!",
    "📦 Recycle cardboard boxes - saves 9 cubic yards of landfill space!",
)


def flatten_pool(pool: Dict[str, List[dict]], title_key: str = "title", icon_key: str = "icon") -> Tuple[ContentEntry, ...]:
    """
    Flattens a category-grouped pool into one ordered tuple of entries.

    Raises:
        ConfigurationError: if the pool, or any category in it, is empty, or
            an entry fails validation.
    """
    if not pool:
        raise ConfigurationError("Content pool is empty.")

    entries = []
    for category, items in pool.items():
        if not items:
            raise ConfigurationError(f"Category '{category}' has no entries.")
        for index, item in enumerate(items):
            try:
                entries.append(ContentEntry(
                    id=f"{category}_{index}",
                    title=item[title_key],
                    points=item.get("points", 0),
                    difficulty=item.get("difficulty"),
                    category=category,
                    icon=item[icon_key],
                ))
            except (KeyError, ValueError) as e:
                raise ConfigurationError(f"Invalid entry {category}_{index}: {e}") from e
    return tuple(entries)


def pool_stats(pool: Dict[str, List[dict]]) -> dict:
    category_counts = {category: len(items) for category, items in pool.items()}
    return {
        "totalCategories": len(category_counts),
        "categoryCounts": category_counts,
        "totalTips": sum(category_counts.values()),
    }


# Validated once at import so a broken pool fails the deploy, not a run.
CHALLENGES: Tuple[ContentEntry, ...] = flatten_pool(CHALLENGE_POOL)
TIPS: Tuple[ContentEntry, ...] = flatten_pool(TIP_POOL, title_key="tip", icon_key="emoji")

if not BROADCAST_TIPS:
    raise ConfigurationError("Broadcast tip list is empty.")
