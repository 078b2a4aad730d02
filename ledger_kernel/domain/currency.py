"""Currency -- code registry with display symbols and minor-unit precision."""

from dataclasses import dataclass
from typing import ClassVar

# Every currency in this kernel has 100 minor units per major unit.
DECIMAL_PLACES = 2
MINOR_UNITS_PER_MAJOR = 10 ** DECIMAL_PLACES


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single currency."""

    code: str
    name: str
    symbol: str

    @property
    def decimal_places(self) -> int:
        return DECIMAL_PLACES

    @property
    def minor_units(self) -> int:
        """Minor units per major unit (e.g. cents per dollar)."""
        return MINOR_UNITS_PER_MAJOR


class CurrencyRegistry:
    """Static table of currency codes, names and display symbols."""

    # Symbols carry no digits, "-", "." or ",": displayed text must parse back.
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        # Major currencies
        "USD": CurrencyInfo("USD", "US Dollar", "$"),
        "EUR": CurrencyInfo("EUR", "Euro", "€"),
        "GBP": CurrencyInfo("GBP", "Pound Sterling", "£"),
        "JPY": CurrencyInfo("JPY", "Japanese Yen", "¥"),
        "CHF": CurrencyInfo("CHF", "Swiss Franc", "CHF"),
        "CAD": CurrencyInfo("CAD", "Canadian Dollar", "$"),
        "AUD": CurrencyInfo("AUD", "Australian Dollar", "$"),
        "NZD": CurrencyInfo("NZD", "New Zealand Dollar", "$"),
        "CNY": CurrencyInfo("CNY", "Chinese Yuan", "¥"),
        # Europe
        "BGN": CurrencyInfo("BGN", "Bulgarian Lev", "лв"),
        "CZK": CurrencyInfo("CZK", "Czech Koruna", "Kč"),
        "DKK": CurrencyInfo("DKK", "Danish Krone", "kr"),
        "HUF": CurrencyInfo("HUF", "Hungarian Forint", "Ft"),
        "ISK": CurrencyInfo("ISK", "Icelandic Krona", "kr"),
        "NOK": CurrencyInfo("NOK", "Norwegian Krone", "kr"),
        "PLN": CurrencyInfo("PLN", "Polish Zloty", "zł"),
        "RON": CurrencyInfo("RON", "Romanian Leu", "lei"),
        "RSD": CurrencyInfo("RSD", "Serbian Dinar", "дин"),
        "RUB": CurrencyInfo("RUB", "Russian Ruble", "₽"),
        "SEK": CurrencyInfo("SEK", "Swedish Krona", "kr"),
        "TRY": CurrencyInfo("TRY", "Turkish Lira", "₺"),
        "UAH": CurrencyInfo("UAH", "Ukrainian Hryvnia", "₴"),
        # Americas
        "ARS": CurrencyInfo("ARS", "Argentine Peso", "$"),
        "BRL": CurrencyInfo("BRL", "Brazilian Real", "R$"),
        "CLP": CurrencyInfo("CLP", "Chilean Peso", "$"),
        "COP": CurrencyInfo("COP", "Colombian Peso", "$"),
        "MXN": CurrencyInfo("MXN", "Mexican Peso", "$"),
        "PEN": CurrencyInfo("PEN", "Peruvian Sol", "S/"),
        "UYU": CurrencyInfo("UYU", "Uruguayan Peso", "$U"),
        # Asia / Pacific
        "HKD": CurrencyInfo("HKD", "Hong Kong Dollar", "$"),
        "IDR": CurrencyInfo("IDR", "Indonesian Rupiah", "Rp"),
        "ILS": CurrencyInfo("ILS", "Israeli New Shekel", "₪"),
        "INR": CurrencyInfo("INR", "Indian Rupee", "₹"),
        "KRW": CurrencyInfo("KRW", "South Korean Won", "₩"),
        "MYR": CurrencyInfo("MYR", "Malaysian Ringgit", "RM"),
        "PHP": CurrencyInfo("PHP", "Philippine Peso", "₱"),
        "PKR": CurrencyInfo("PKR", "Pakistani Rupee", "₨"),
        "SGD": CurrencyInfo("SGD", "Singapore Dollar", "$"),
        "THB": CurrencyInfo("THB", "Thai Baht", "฿"),
        "TWD": CurrencyInfo("TWD", "New Taiwan Dollar", "NT$"),
        "VND": CurrencyInfo("VND", "Vietnamese Dong", "₫"),
        # Middle East / Africa
        "AED": CurrencyInfo("AED", "UAE Dirham", "Dh"),
        "EGP": CurrencyInfo("EGP", "Egyptian Pound", "£"),
        "KES": CurrencyInfo("KES", "Kenyan Shilling", "KSh"),
        "MAD": CurrencyInfo("MAD", "Moroccan Dirham", "DH"),
        "NGN": CurrencyInfo("NGN", "Nigerian Naira", "₦"),
        "SAR": CurrencyInfo("SAR", "Saudi Riyal", "﷼"),
        "ZAR": CurrencyInfo("ZAR", "South African Rand", "R"),
        # Special codes
        "XAU": CurrencyInfo("XAU", "Gold (troy ounce)", "oz t"),
        "XTS": CurrencyInfo("XTS", "Testing Code", "XTS"),
    }

    @staticmethod
    def normalize(code: str) -> str:
        return code.upper().strip() if isinstance(code, str) else ""

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code resolves to a known currency."""
        return cls.normalize(code) in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        return cls._CURRENCIES.get(cls.normalize(code))

    @classmethod
    def get_symbol(cls, code: str) -> str | None:
        info = cls.get_info(code)
        return info.symbol if info else None

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all known currency codes."""
        return frozenset(cls._CURRENCIES.keys())
