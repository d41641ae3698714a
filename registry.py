from adapters.solidity_adapter import SolidityAdapter
from errors import UnsupportedLanguageError

solidity_adapter = SolidityAdapter()

_ADAPTERS = {
    solidity_adapter.language: solidity_adapter,
}

def get_adapter(language: str) -> SolidityAdapter:
    adapter = _ADAPTERS.get((language or "").strip().lower())
    if adapter is None:
        raise UnsupportedLanguageError(language)
    return adapter

def supported_languages() -> list[str]:
    return sorted(_ADAPTERS)
