"""
Builds the user-facing title, body and data payload for every notification.

All builders are pure and total over their declared inputs: values without a
bespoke message fall through to a generic template.
"""

from typing import Optional

from models import NotificationContent

CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"

# --- CATEGORIES ---
CATEGORY_MILESTONE = "milestone"
CATEGORY_SCAN_INSIGHT = "scan_insight"
CATEGORY_DAILY_CHALLENGE = "daily_challenge"
CATEGORY_ECO_TIP = "eco_tip"
CATEGORY_STREAK_REMINDER = "streak_reminder"
CATEGORY_RE_ENGAGEMENT = "re_engagement"
CATEGORY_GENERAL = "general"

# (lower bound inclusive, title, body template)
SCAN_SCORE_BANDS = (
    (80, "Excellent Choice! 🌟", "{name} has a fantastic eco-score of {score}/100! You're making sustainable choices!"),
    (60, "Good Pick! ✅", "{name} scored {score}/100. Check out eco-friendly alternatives to score higher!"),
    (40, "Room for Improvement 💡", "{name} scored {score}/100. Consider greener options for a better planet!"),
    (0, "Low Eco-Score ⚠️", "{name} has an eco-score of {score}/100. Let's find a more sustainable alternative!"),
)

STREAK_BADGES = {
    3: "🌱 Green Starter",
    7: "🔥 Week Warrior",
    30: "🏆 Eco Champion",
    100: "👑 Eco Legend",
}

STREAK_MESSAGES = {
    7: ("🔥 7-Day Streak Milestone!", "One week of eco-consciousness! You're building an amazing habit!"),
    14: ("🌟 2-Week Streak Achieved!", "Two weeks strong! You're making a real environmental impact!"),
    30: ("🏆 1-Month Streak Champion!", "A full month! You're officially an eco champion! Keep going!"),
    50: ("💎 50-Day Streak Legend!", "50 days of consistency! You're absolutely unstoppable!"),
    100: ("👑 100-DAY STREAK MASTERY!", "LEGENDARY! 100 days of dedication! You're inspiring the planet!"),
    200: ("🌍 200-DAY WORLD-CLASS STREAK!", "PHENOMENAL! 200 days! You're a true eco warrior and role model!"),
}


def _format_score(score) -> str:
    return f"{score:g}" if isinstance(score, float) else str(score)


def build_scan_insight(product_name: str, score, product_id: Optional[str] = None) -> NotificationContent:
    """Scan feedback tiered by eco-score: 80, 60 and 40 are inclusive lower bounds."""
    for lower_bound, title, template in SCAN_SCORE_BANDS:
        if score >= lower_bound:
            break
    shown = _format_score(score)
    data = {"productName": product_name, "ecoScore": shown}
    if product_id:
        data["productId"] = product_id
    return NotificationContent(
        title=title,
        body=template.format(name=product_name, score=shown),
        category=CATEGORY_SCAN_INSIGHT,
        data=data,
    )


def streak_badge(streak: int) -> str:
    return STREAK_BADGES.get(streak, f"🌟 {streak}-Day Streak")


def build_streak_milestone(streak: int) -> NotificationContent:
    badge = streak_badge(streak)
    title, body = STREAK_MESSAGES.get(
        streak,
        (f"🎉 {streak}-Day Streak!", f"🎉 Amazing! You've earned the \"{badge}\" badge. Keep going!"),
    )
    return NotificationContent(
        title=title,
        body=body,
        category=CATEGORY_MILESTONE,
        data={"type": "streak_milestone", "streak": streak, "badge": badge, "clickAction": CLICK_ACTION},
    )


def build_points_milestone(milestone: int, points: int) -> NotificationContent:
    return NotificationContent(
        title=f"{milestone} Points Milestone! 🎯",
        body=f"🌟 Incredible! You've reached {milestone} EcoPoints. You're making a real difference!",
        category=CATEGORY_MILESTONE,
        data={"type": "points_milestone", "points": points, "milestone": milestone},
    )


def build_rank_up(old_rank: str, new_rank: str) -> NotificationContent:
    return NotificationContent(
        title="Rank Up! 🎖️",
        body=f"Congratulations! You've advanced to {new_rank}! Keep up the amazing work!",
        category=CATEGORY_MILESTONE,
        data={"type": "rank_up", "oldRank": old_rank, "newRank": new_rank, "rank": new_rank},
    )


def build_streak_warning(streak: int) -> NotificationContent:
    """Evening reminder for a user who has not finished today's challenges."""
    if streak <= 0:
        title = "🌱 Start Your Eco Journey"
        body = "Complete your first daily challenge and begin your streak!"
    elif streak == 1:
        title = "⚠️ Don't Lose Your Streak!"
        body = "Your 1-day streak is waiting! Complete today's challenge now!"
    elif streak < 7:
        title = "🔥 Your Streak Is At Risk!"
        body = f"Don't lose your {streak}-day streak! You have until midnight to complete today's challenge!"
    elif streak < 30:
        title = "🚨 URGENT: Streak Warning!"
        body = f"Your amazing {streak}-day streak is about to end! Take action now!"
    else:
        title = "👑 LEGENDARY STREAK AT RISK!"
        body = f"Don't let your epic {streak}-day streak die! You've come so far - finish today's challenge!"

    return NotificationContent(
        title=title,
        body=body,
        category=CATEGORY_STREAK_REMINDER,
        data={"type": "streak_warning", "streak": streak, "clickAction": CLICK_ACTION},
    )


def build_re_engagement(old_streak: int) -> NotificationContent:
    if old_streak <= 0:
        title = "🌱 Ready to Start?"
        body = "Begin your eco journey today! Complete your first daily challenge and earn points!"
    elif old_streak < 7:
        title = "💚 We Miss You!"
        body = f"You had a {old_streak}-day streak going! Come back and restart your eco journey!"
    else:
        title = f"🔥 Your {old_streak}-Day Streak Awaits!"
        body = "You were doing amazing! Come back and rebuild your streak - the planet needs you!"

    return NotificationContent(
        title=title,
        body=body,
        category=CATEGORY_RE_ENGAGEMENT,
        data={"type": "re_engagement", "oldStreak": old_streak, "clickAction": CLICK_ACTION},
    )


def build_daily_challenge_reminder() -> NotificationContent:
    return NotificationContent(
        title="Today's Eco Challenge! 🌞",
        body="Good morning! Complete today's eco challenge and earn bonus points!",
        category=CATEGORY_DAILY_CHALLENGE,
        data={"type": "reminder"},
    )


def build_eco_tip(tip: str) -> NotificationContent:
    return NotificationContent(
        title="Eco Tip of the Day 💡",
        body=tip,
        category=CATEGORY_ECO_TIP,
        data={"tip": tip},
    )


def build_broadcast(title: str, body: str, category: Optional[str] = None) -> NotificationContent:
    return NotificationContent(title=title, body=body, category=category or CATEGORY_GENERAL)
