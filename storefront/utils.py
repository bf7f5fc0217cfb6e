from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import bleach


def sanitize_input(value: Optional[str]) -> str:
    """Sanitize a user-supplied search string.

    - Strips HTML tags using bleach.clean(..., strip=True)
    - Trims whitespace

    Punctuation such as ';' and '--' is kept: product text may contain it and
    the search itself runs as a bound parameter.
    """
    if value is None:
        return ""
    # remove NULL bytes
    val = value.replace("\x00", "")
    # strip tags
    val = bleach.clean(val, tags=set(), strip=True)
    # bleach escapes what it keeps; searches match raw text
    val = val.replace("&amp;", "&").replace("&lt;", "<").replace("&gt;", ">")
    return val.strip()


# Business rule: money is held rounded to 2 decimals, half up

def round_amount(value: Decimal) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
