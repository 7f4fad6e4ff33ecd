from finlingo.components.dom_translator import DomTranslator, ElementTreeAdapter
from finlingo.components.locale_persistence import LanguageSwitcher, LocalePersistence

__all__ = ["DomTranslator", "ElementTreeAdapter", "LanguageSwitcher", "LocalePersistence"]
