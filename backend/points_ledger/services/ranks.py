"""Title hierarchy — higher number = higher rank."""
from points_ledger.errors import PermissionDeniedError
from points_ledger.models.employee import Title

TITLE_RANK: dict[Title, int] = {
    Title.team_member: 1,
    Title.shift_manager: 2,
    Title.assistant_manager: 3,
    Title.general_manager: 4,
}


def rank_of(title: str | None) -> int:
    """Map a roster title to its rank. Unknown or missing titles fail closed."""
    try:
        return TITLE_RANK[Title(title)]
    except ValueError:
        raise PermissionDeniedError(f"Unknown title {title!r} has no rank")


def can_award(actor_title: str | None, target_title: str | None) -> bool:
    """An actor may award points only to strictly lower-ranked employees."""
    return rank_of(actor_title) > rank_of(target_title)


def awardable_titles(actor_title: str | None) -> list[Title]:
    """Titles an actor may award points to, lowest first."""
    actor_rank = rank_of(actor_title)
    return [title for title, rank in TITLE_RANK.items() if rank < actor_rank]
