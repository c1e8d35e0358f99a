"""Currency table and amount helpers"""
from typing import Dict, List, NamedTuple, Optional


class CurrencyInfo(NamedTuple):
    code: str
    name: str
    symbol: str


CURRENCIES: List[CurrencyInfo] = [
    # Major currencies
    CurrencyInfo("USD", "US Dollar", "$"),
    CurrencyInfo("EUR", "Euro", "€"),
    CurrencyInfo("GBP", "British Pound", "£"),
    CurrencyInfo("JPY", "Japanese Yen", "¥"),
    CurrencyInfo("CNY", "Chinese Yuan", "¥"),
    CurrencyInfo("INR", "Indian Rupee", "₹"),
    # North America
    CurrencyInfo("CAD", "Canadian Dollar", "C$"),
    CurrencyInfo("MXN", "Mexican Peso", "$"),
    # Europe
    CurrencyInfo("CHF", "Swiss Franc", "CHF"),
    CurrencyInfo("SEK", "Swedish Krona", "kr"),
    CurrencyInfo("NOK", "Norwegian Krone", "kr"),
    CurrencyInfo("DKK", "Danish Krone", "kr"),
    CurrencyInfo("PLN", "Polish Zloty", "zł"),
    CurrencyInfo("CZK", "Czech Koruna", "Kč"),
    CurrencyInfo("HUF", "Hungarian Forint", "Ft"),
    CurrencyInfo("RON", "Romanian Leu", "lei"),
    CurrencyInfo("RUB", "Russian Ruble", "₽"),
    CurrencyInfo("UAH", "Ukrainian Hryvnia", "₴"),
    CurrencyInfo("TRY", "Turkish Lira", "₺"),
    # Asia Pacific
    CurrencyInfo("AUD", "Australian Dollar", "A$"),
    CurrencyInfo("NZD", "New Zealand Dollar", "NZ$"),
    CurrencyInfo("SGD", "Singapore Dollar", "S$"),
    CurrencyInfo("HKD", "Hong Kong Dollar", "HK$"),
    CurrencyInfo("KRW", "South Korean Won", "₩"),
    CurrencyInfo("TWD", "Taiwan Dollar", "NT$"),
    CurrencyInfo("THB", "Thai Baht", "฿"),
    CurrencyInfo("MYR", "Malaysian Ringgit", "RM"),
    CurrencyInfo("IDR", "Indonesian Rupiah", "Rp"),
    CurrencyInfo("PHP", "Philippine Peso", "₱"),
    CurrencyInfo("VND", "Vietnamese Dong", "₫"),
    CurrencyInfo("PKR", "Pakistani Rupee", "₨"),
    CurrencyInfo("BDT", "Bangladeshi Taka", "৳"),
    CurrencyInfo("LKR", "Sri Lankan Rupee", "Rs"),
    CurrencyInfo("NPR", "Nepalese Rupee", "₨"),
    # Middle East
    CurrencyInfo("AED", "UAE Dirham", "د.إ"),
    CurrencyInfo("SAR", "Saudi Riyal", "﷼"),
    CurrencyInfo("QAR", "Qatari Riyal", "﷼"),
    CurrencyInfo("KWD", "Kuwaiti Dinar", "د.ك"),
    CurrencyInfo("BHD", "Bahraini Dinar", "BD"),
    CurrencyInfo("OMR", "Omani Rial", "﷼"),
    CurrencyInfo("ILS", "Israeli Shekel", "₪"),
    # Africa
    CurrencyInfo("ZAR", "South African Rand", "R"),
    CurrencyInfo("EGP", "Egyptian Pound", "E£"),
    CurrencyInfo("NGN", "Nigerian Naira", "₦"),
    CurrencyInfo("KES", "Kenyan Shilling", "KSh"),
    CurrencyInfo("GHS", "Ghanaian Cedi", "₵"),
    CurrencyInfo("MAD", "Moroccan Dirham", "د.م."),
    # South America
    CurrencyInfo("BRL", "Brazilian Real", "R$"),
    CurrencyInfo("ARS", "Argentine Peso", "$"),
    CurrencyInfo("CLP", "Chilean Peso", "$"),
    CurrencyInfo("COP", "Colombian Peso", "$"),
    CurrencyInfo("PEN", "Peruvian Sol", "S/"),
    # Other
    CurrencyInfo("ISK", "Icelandic Króna", "kr"),
]

_BY_CODE: Dict[str, CurrencyInfo] = {c.code: c for c in CURRENCIES}


def get_currency_by_code(code: str) -> Optional[CurrencyInfo]:
    return _BY_CODE.get(code.upper()) if code else None


def get_exchange_rate_lookup_url(from_currency: str, to_currency: str) -> str:
    return f"https://www.google.com/search?q=1+{from_currency}+to+{to_currency}"


def calculate_converted_amount(amount: float, exchange_rate: float) -> float:
    """Convert and round to 2 decimal places"""
    return round(amount * exchange_rate * 100) / 100


def format_plain_amount(amount: float) -> str:
    """499.0 -> '499', 499.5 -> '499.5' (used in reminder messages)"""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def format_amount(amount: float, currency: str = "INR") -> str:
    """Amount with currency symbol and thousands separators, e.g. ₹1,250.50"""
    info = get_currency_by_code(currency)
    symbol = info.symbol if info else f"{currency} "
    if float(amount).is_integer():
        return f"{symbol}{int(amount):,}"
    return f"{symbol}{amount:,.2f}"
