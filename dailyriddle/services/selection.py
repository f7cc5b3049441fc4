import random
from datetime import date
from typing import Optional, Sequence, TypeVar

from ..config import settings

T = TypeVar("T")


def selection_seed(user_id: str, day: date, salt: str, scope: Optional[str] = None) -> str:
    """
    Seçim tohumu:
    - scope="user": kullanıcı + gün (herkese farklı bilmece)
    - scope="global": yalnızca gün (günün bilmecesi herkes için aynı)
    """
    scope = scope or settings.SELECTION_SCOPE
    if scope == "global":
        return f"{salt}-{day.isoformat()}"
    return f"{salt}-{user_id}-{day.isoformat()}"


def pick_for_day(
    rows: Sequence[T],
    user_id: str,
    day: date,
    salt: str,
    scope: Optional[str] = None,
) -> Optional[T]:
    """
    Aktif satırlar arasından deterministik seçim yapar.
    Satırlar id'ye göre sıralı gelmelidir; aynı küme + aynı tohum → aynı satır.
    """
    if not rows:
        return None
    rnd = random.Random(selection_seed(user_id, day, salt, scope))
    return rows[rnd.randint(0, len(rows) - 1)]
