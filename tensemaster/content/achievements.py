"""Achievement catalog. Order here is the order pop-ups are shown in."""

from tensemaster.core.models import Achievement, AchievementReward


def _achievement(achievement_id: str, name: str, description: str, xp: int, ai_coins: int) -> Achievement:
    return Achievement(
        id=achievement_id,
        name=name,
        description=description,
        reward=AchievementReward(xp=xp, ai_coins=ai_coins),
    )


ACHIEVEMENTS: tuple[Achievement, ...] = (
    _achievement("first-quiz", "First Step", "Complete your first quiz.", 50, 10),
    _achievement("perfect-score", "Perfectionist", "Get a perfect score (100%) on any quiz.", 100, 50),
    _achievement("present-master", "Present Pro", "Complete all Present Tenses quizzes.", 200, 100),
    _achievement("past-master", "Past Pro", "Complete all Past Tenses quizzes.", 200, 100),
    _achievement("future-master", "Future Pro", "Complete all Future Tenses quizzes.", 200, 100),
    _achievement("passive-master", "Passive Pro", "Complete all Passive Voice quizzes.", 150, 75),
    _achievement("reported-speech-master", "Reported Pro", "Complete all Reported Speech quizzes.", 150, 75),
    _achievement("first-custom-master", "Community Scholar", "Master your first user-created course.", 250, 125),
    _achievement("grammar-guru", "Grammar Guru", "Complete all available courses.", 1000, 500),
    _achievement("streak-starter", "Warming Up", "Maintain a 3-day streak.", 75, 25),
    _achievement("streak-master", "On Fire!", "Maintain a 7-day streak.", 250, 150),
    _achievement("quiz-master", "Dedicated Learner", "Complete 25 quizzes in total.", 300, 200),
    _achievement("high-roller", "Big Spender", "Spend 1000 AI Coins in the shop.", 100, 0),
)
