"""Fixed-point integer arithmetic over a bounded unsigned 128-bit domain.

All pool balances, share counts, stakes and odds are non-negative ints in
attos (10^-18 of one unit). Python ints never overflow, so every helper here
checks its result against U128_MAX and raises ArithmeticOverflowError instead.
No float, no Decimal.
"""

from src.pm_common.errors import ArithmeticOverflowError, DivisionByZeroError

U128_MAX = (1 << 128) - 1
U256_LIMIT = 1 << 256

SCALE = 10**18  # 1.0 in attos


def _fits(value: int) -> bool:
    return 0 <= value <= U128_MAX


def checked_mul(a: int, b: int) -> int | None:
    """Return a * b, or None when the product leaves the 128-bit domain."""
    product = a * b
    return product if _fits(product) else None


def checked_add(a: int, b: int) -> int:
    total = a + b
    if not _fits(total):
        raise ArithmeticOverflowError(f"{a} + {b} exceeds 128-bit domain")
    return total


def checked_sub(a: int, b: int) -> int:
    """a - b, refusing to go below zero."""
    if b > a:
        raise ArithmeticOverflowError(f"{a} - {b} underflows")
    return a - b


def validate_amount(value: int) -> int:
    """Reject anything that is not a representable non-negative amount."""
    if isinstance(value, bool) or not isinstance(value, int) or not _fits(value):
        raise ArithmeticOverflowError(f"Amount out of range: {value}")
    return value


def _wide_mul_div(x: int, y: int, c: int) -> int:
    """floor(x * y / c) through a 256-bit intermediate.

    Both factors are 128-bit values, so the double-width product always
    stays below 2^256 and the division is exact.
    """
    wide = x * y
    if wide >= U256_LIMIT:
        raise ArithmeticOverflowError(f"{x} * {y} exceeds 256-bit intermediate")
    return wide // c


def mul_div(a: int, b: int, c: int) -> int:
    """Compute floor(a * b / c) exactly whenever the quotient fits the domain.

    Ladder:
      1. a * b fits           -> (a * b) // c
      2. a = q*c + r          -> q*b + (r*b) // c   (q*b must fit)
      3. r * b overflows      -> split b = (b//c)*c + b%c:
                                 r*(b//c) + (r*(b%c)) // c
      4. r * (b%c) overflows  -> 256-bit product of the two residues

    Raises DivisionByZeroError when c == 0 and ArithmeticOverflowError when
    q*b or the final sum does not fit.
    """
    if c == 0:
        raise DivisionByZeroError()

    product = checked_mul(a, b)
    if product is not None:
        return product // c

    quotient, remainder = divmod(a, c)
    term1 = checked_mul(quotient, b)
    if term1 is None:
        raise ArithmeticOverflowError(f"mul_div({a}, {b}, {c}) result overflow")

    rem_product = checked_mul(remainder, b)
    if rem_product is not None:
        term2 = rem_product // c
    else:
        b_div_c, b_mod_c = divmod(b, c)
        # remainder < c, so remainder * (b // c) <= b
        sub1 = checked_mul(remainder, b_div_c)
        if sub1 is None:
            raise ArithmeticOverflowError(f"mul_div({a}, {b}, {c}) result overflow")
        tail = checked_mul(remainder, b_mod_c)
        sub2 = tail // c if tail is not None else _wide_mul_div(remainder, b_mod_c, c)
        term2 = checked_add(sub1, sub2)

    return checked_add(term1, term2)


def mul_div_up(a: int, b: int, c: int) -> int:
    """ceil(a * b / c); same domain rules as mul_div."""
    floor = mul_div(a, b, c)
    # a*b mod c from the residues; both are below c, so their product is below 2^256
    if (a % c) * (b % c) % c:
        return checked_add(floor, 1)
    return floor


def to_display(amount: int, decimals: int = 4) -> str:
    """Render attos as a decimal string: 1_500_000_000_000_000_000 -> '1.5000'."""
    whole, frac = divmod(amount, SCALE)
    frac_digits = str(frac).rjust(18, "0")[:decimals]
    return f"{whole:,}.{frac_digits}" if decimals else f"{whole:,}"
