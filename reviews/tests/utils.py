from reviews.models import Team, TeamMember, User


class OrderedSelector:
    """Детерминированный селектор для тестов: берет кандидатов по порядку id"""

    def __init__(self):
        self.calls = []

    def pick(self, candidates, n):
        pool = sorted(set(candidates))
        self.calls.append(('pick', pool, n))
        return pool[:max(n, 0)]

    def pick_one(self, candidates):
        pool = sorted(set(candidates))
        self.calls.append(('pick_one', pool))
        return pool[0]


def make_user(user_id, team=None, is_active=True, username=None):
    user = User.objects.create(id=user_id, username=username or user_id, is_active=is_active)
    if team is not None:
        TeamMember.objects.create(team=team, user=user)
    return user


def make_team(name, *members):
    """members - кортежи (user_id, is_active)"""
    team = Team.objects.create(name=name)
    for user_id, is_active in members:
        make_user(user_id, team=team, is_active=is_active)
    return team
