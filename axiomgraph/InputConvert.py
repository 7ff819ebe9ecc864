# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, truncate: bool = True) -> T:
    """
    Convert `obj` to `dest_type` (float or int).

    Used wherever a parameter value arrives from outside the engine (a
    slider, a text box, a test), so both ``2.5`` and ``"pi/2"`` are accepted.

    Rules:
    - If `obj` is a number: cast via dest_type(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else parse as a SymPy expression, then evaluate.
    - Results with a non-zero imaginary part are rejected.

    Truncation Rules (`truncate`), Float -> Int only:
    - If `truncate=True`: Round to the nearest integer (e.g., 3.6 -> 4).
    - If `truncate=False`: Require exact integer (e.g., 3.0 -> 3, 3.1 -> Error).

    Raises
    ------
    NotImplementedError
        If dest_type is unsupported.
    ValueError
        If conversion fails or violates truncation rules.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    def _coerce_real_value(x: complex) -> T:
        if x.imag != 0:
            raise ValueError(
                f"Could not convert non-real {x!r} to {dest_type.__name__}: imaginary part is non-zero."
            )
        r_val = float(x.real)

        if dest_type is float:
            return r_val  # type: ignore[return-value]

        if not math.isfinite(r_val):
            raise ValueError(f"Could not convert {r_val!r} to int.")
        if not r_val.is_integer():
            if not truncate:
                raise ValueError(
                    f"Could not convert {x!r} to int: value is not an exact integer."
                )
            return int(round(r_val))  # type: ignore[return-value]
        return int(r_val)  # type: ignore[return-value]

    # Fast path: numeric types (exclude bool)
    if isinstance(obj, (int, float)) and not isinstance(obj, bool):
        return _coerce_real_value(complex(obj))

    # String path
    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")

        # 1) Plain native conversion
        try:
            return _coerce_real_value(complex(float(s)))
        except ValueError:
            pass

        # 2) SymPy path
        try:
            expr = sp.sympify(s.replace("^", "**"))
            # evalf() returns a SymPy Number; complex() handles both real and complex results.
            val = complex(expr.evalf())
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to {dest_type.__name__} (neither directly nor via SymPy)."
            ) from e
        return _coerce_real_value(val)

    # Fallback: try converting generically (numpy scalars, sympy numbers)
    try:
        val = complex(obj)
    except Exception as e:
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e
    return _coerce_real_value(val)

# === END OF SECTION: InputConvert [id: InputConvert]===
