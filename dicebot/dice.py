"""Dice roll expression engine.

Parses roll commands of the form ``r<amount>?d<face>?<additions>?`` with the
trigger character already stripped, rolls the dice and renders the reply.
Examples: rd, r3d6, r2d10+2, rd20-1+3, 3d6+2.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

# Addition terms are capped at nine digits; longer terms are a format error.
_COMMAND_RE = re.compile(
    r"r?(?P<amount>\d+)?d(?P<face>\d+)?(?P<additions>(?:[+-]\d{1,9})*)",
    re.ASCII,
)
_TERM_RE = re.compile(r"[+-]\d{1,9}", re.ASCII)

MIN_AMOUNT = 1
MAX_AMOUNT = 100
MIN_FACE = 4
MAX_FACE = 100
DEFAULT_FACE = 20

# Every bound fits in three digits.
_MAX_BOUND_DIGITS = 3


class DiceError(ValueError):
    """Base class for user-facing dice errors; the message is the reply text."""


class FormatError(DiceError):
    """Raised when a command does not match the roll grammar."""


class RangeError(DiceError):
    """Raised when amount or face fall outside the permitted bounds."""


class EvaluationError(DiceError):
    """Raised when an additions fragment is not a sum of signed integers."""


@dataclass(frozen=True)
class RollParameters:
    amount: int = 1
    face: int = DEFAULT_FACE
    additions: str = ""


@dataclass(frozen=True)
class RollResult:
    amount: int
    face: int
    additions: str
    values: tuple[int, ...]
    sum: int


def validate_face(face: int) -> int:
    """Return face unchanged, or raise RangeError if it is not a valid die."""
    if not MIN_FACE <= face <= MAX_FACE:
        raise RangeError(f"invalid die type: D{face}")
    return face


def _digits_in_bounds(digits: str) -> str | None:
    """Strip leading zeros; None when the number is too long to be in range."""
    digits = digits.lstrip("0") or "0"
    if len(digits) > _MAX_BOUND_DIGITS:
        return None
    return digits


def parse_face(digits: str) -> int:
    """Convert a face given as ASCII digits, e.g. from ``.set d8``.

    Raises:
        RangeError: If the face is not a valid die.
    """
    bounded = _digits_in_bounds(digits)
    if bounded is None:
        raise RangeError(f"invalid die type: D{digits.lstrip('0')}")
    return validate_face(int(bounded))


def parse_roll_options(command: str, default_face: int | None = None) -> RollParameters:
    """Parse a roll command into validated parameters.

    Args:
        command: Command text without the trigger character, e.g. "r3d6+2".
        default_face: Conversation default used when the command has no face.

    Returns:
        RollParameters with amount and face inside their bounds.

    Raises:
        FormatError: If the command does not match the roll grammar.
        RangeError: If amount or face is out of range.
    """
    m = _COMMAND_RE.fullmatch(command)
    if not m:
        raise FormatError("command format invalid")

    amount_digits = _digits_in_bounds(m.group("amount") or "1")
    if amount_digits is None or not MIN_AMOUNT <= int(amount_digits) <= MAX_AMOUNT:
        raise RangeError("too many dice")
    amount = int(amount_digits)

    if m.group("face"):
        face = parse_face(m.group("face"))
    elif default_face is not None:
        face = validate_face(default_face)
    else:
        face = DEFAULT_FACE

    return RollParameters(amount=amount, face=face, additions=m.group("additions"))


def evaluate_additions(additions: str) -> int:
    """Sum a fragment of signed integer terms such as "+3-1". Empty is 0.

    Raises:
        EvaluationError: If the fragment contains anything but signed integers.
    """
    terms = _TERM_RE.findall(additions)
    if "".join(terms) != additions:
        raise EvaluationError(f"cannot evaluate additions: {additions!r}")
    return sum(int(term) for term in terms)


def roll(params: RollParameters) -> RollResult:
    """Roll the dice described by params.

    Each die is an independent uniform draw in [1, face].

    Raises:
        EvaluationError: If params.additions cannot be evaluated.
    """
    addition = evaluate_additions(params.additions)
    values = tuple(random.randint(1, params.face) for _ in range(params.amount))
    return RollResult(
        amount=params.amount,
        face=params.face,
        additions=params.additions,
        values=values,
        sum=sum(values) + addition,
    )


def format_roll_result(result: RollResult) -> str:
    """Render a result as "r2d6+1 = 3+5+1 = 9"."""
    command = f"r{result.amount}d{result.face}{result.additions}"
    values = "+".join(str(v) for v in result.values)
    return f"{command} = {values}{result.additions} = {result.sum}"
