STORAGE_SIZE_MODULUS = 1024.0
TIME_MODULUS = 1000


def format_bytes(number) -> str:
    for unit in ["B", "K", "M", "G", "T"]:
        if number >= STORAGE_SIZE_MODULUS:
            number /= STORAGE_SIZE_MODULUS
            continue

        if unit in {"B", "K"}:
            return f"{int(number)}{unit}"

        return f"{number:.1f}{unit}"

    return f"{number:.1f}P"


def format_integer(number) -> str:
    return f"{number:,}"


def format_microseconds(number: float) -> str:
    if number < TIME_MODULUS:
        return f"{number:.1f}us"

    number /= TIME_MODULUS
    if number < TIME_MODULUS:
        return f"{number:.1f}ms"

    return f"{number / TIME_MODULUS:.1f}s"
