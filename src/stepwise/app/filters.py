from __future__ import annotations

from stepwise.engine.selectors import ClassSelector, MethodSelector


def parse_test_filter(text: str, base_package: str | None = None) -> list[ClassSelector | MethodSelector]:
    # Colon-separated tokens, as passed by build tools: "Class", "Class#method", "mod.Class.method".
    selectors: list[ClassSelector | MethodSelector] = []
    for raw in text.split(":"):
        token = raw.strip()
        if token.endswith("$"):
            # IDE runners anchor exact matches with a trailing regex "$".
            token = token[:-1]
        if not token:
            continue
        selectors.append(_parse_token(token, base_package))
    return selectors


def _parse_token(token: str, base_package: str | None) -> ClassSelector | MethodSelector:
    if "#" in token:
        class_path, _, method_name = token.partition("#")
        return MethodSelector(class_target=qualify(class_path, base_package), method_name=method_name)

    parts = token.split(".")
    # "Class.method": a lowercase segment after a capitalized one names a method.
    if len(parts) >= 2 and _is_method_name(parts[-1]) and parts[-2][:1].isupper():
        return MethodSelector(class_target=qualify(".".join(parts[:-1]), base_package), method_name=parts[-1])
    return ClassSelector(qualify(token, base_package))


def qualify(name: str, base_package: str | None) -> str:
    if not base_package or name == base_package or name.startswith(f"{base_package}."):
        return name
    return f"{base_package}.{name}"


def _is_method_name(segment: str) -> bool:
    return bool(segment) and (segment[0].islower() or segment[0] == "_")
