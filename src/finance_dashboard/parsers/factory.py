import importlib
from datetime import timezone, tzinfo
from typing import Optional, Dict, Type, Any
from finance_dashboard.parsers.base import TransactionParser
from finance_dashboard.config.settings import ConfigLoader

class ParserFactory:
    """
    Factory for creating transaction file parsers.

    Uses a registry pattern to map file format identifiers to parser classes.
    """

    _locked = False
    _registry: Dict[str, Type[TransactionParser]] = {}

    @classmethod
    def register(cls, file_format: str, parser_class: Type[TransactionParser]) -> None:
        """
        Register a parser for a file format

        Args:
            file_format: Unique identifier for the format (e.g, 'json', 'csv')
            parser_class: The parser class

        Raises:
            ValueError: If parser is already registered
            TypeError: If parser_class doesn't inherit from TransactionParser
            RuntimeError: If the parser registry is locked

        Example:
            ParserFactory.register('json', JsonDumpParser)
        """
        if cls._locked:
            raise RuntimeError("Registry is locked, cannot add more parsers")

        if file_format in cls._registry:
            raise ValueError(f"Parser for '{file_format}' is already registered")

        if not issubclass(parser_class, TransactionParser):
            raise TypeError(f"{parser_class} must inherit from TransactionParser")

        cls._registry[file_format] = parser_class

    @classmethod
    def lock_registry(cls):
        """Prevent further registration (call after app initialization)"""
        cls._locked = True

    @classmethod
    def create_parser(cls, file_format: str, tz: tzinfo = timezone.utc) -> TransactionParser:
        """
        Create a parser instance for the specified format.

        Args:
            file_format: Registered format identifier
            tz: Timezone that dates without an offset are read in

        Raises:
            ValueError: If no parser registered for this format

        Example:
            parser = ParserFactory.create_parser('json')
            transactions = parser.parse('transactions.json')
        """
        if file_format not in cls._registry:
            available = ', '.join(cls._registry.keys())
            raise ValueError(
                f"No parser registered for '{file_format}'. "
                f"Available parsers: {available}"
            )

        return cls._registry[file_format](tz=tz)

    @classmethod
    def get_available_formats(cls) -> list[str]:
        """Return list of all registered format identifiers"""
        return list(cls._registry.keys())

    @classmethod
    def load_parsers_from_config(
        cls,
        config: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Load and register parsers from configuration. Does nothing once the
        registry is locked.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Useful for testing with custom configs.
        """
        if cls._locked:
            return

        if config is None:
            config = ConfigLoader.load_parsers_config()

        for parser_config in config['parsers']:
            module_path, class_name = str(parser_config['class']).rsplit('.', 1)
            module = importlib.import_module(module_path)
            parser_class = getattr(module, class_name)

            cls.register(parser_config['format'], parser_class)

        cls.lock_registry()
