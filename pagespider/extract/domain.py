"""Domain name splitting based on a built-in public suffix table."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

_SECOND_LEVEL = {
    "cn": "ac com edu gov mil net org ah bj cq fj gd gs gz gx ha hb he hi hl hn jl js jx "
    "ln nm nx qh sc sd sh sn sx tj xj xz yn zj hk mo tw",
    "uk": "ac co gov ltd me net nhs org plc police sch",
    "jp": "ac ad co ed go gr lg ne or",
    "hk": "com edu gov idv net org",
    "mo": "com edu gov net org",
    "tw": "com edu gov idv mil net org club game ebiz",
    "sg": "com edu gov net org per",
    "au": "asn com edu gov id net org",
    "kr": "ac co es go hs kg mil ms ne or pe re sc",
    "th": "ac co go in mi net or",
    "in": "ac co edu firm gen gov ind mil net nic org res",
    "my": "com edu gov mil name net org",
    "br": "com edu gov net org",
    "tr": "com edu gov net org",
    "vn": "com edu gov net org",
    "eg": "com edu eun gov mil name net org sci",
    "nz": "ac co govt net org",
    "za": "ac co gov org",
    "mm": "com edu gov net org",
    "ph": "com edu gov mil net org",
    "pk": "com edu gov net org",
    "id": "ac co go net or sch web",
    "il": "ac co gov idf k12 muni net org",
}
_SECOND_LEVEL_SETS = {tld: set(labels.split()) for tld, labels in _SECOND_LEVEL.items()}

_ICANN_TLDS = set(_SECOND_LEVEL) | set(
    "com net org gov edu mil int info biz name pro mobi asia io ai co me tv cc us ca de fr es it "
    "ru eu nl se pl be ch at dk no fi ie pt gr cz hu ro ua il sa ae ir iq ma ke ng ar mx cl pe ve "
    "lk si sk lt hr bg am aw ai ao al af dz az kp lb np py bd".split()
)


@dataclass
class Domain:
    """A host split into subdomain, registrable name and public suffix."""

    subdomain: str
    domain: str
    tld: str
    icann: bool


def public_suffix(domain: str) -> tuple[str, bool]:
    """Return the public suffix of ``domain`` and whether it is an ICANN suffix."""
    labels = domain.lower().split(".")
    last = labels[-1]
    if len(labels) >= 2 and labels[-2] in _SECOND_LEVEL_SETS.get(last, ()):
        return ".".join(labels[-2:]), True
    return last, last in _ICANN_TLDS


def _effective_tld_plus_one(domain: str) -> str:
    if domain.startswith(".") or domain.endswith(".") or ".." in domain:
        raise ValueError(f"empty label in domain {domain!r}")
    suffix, _ = public_suffix(domain)
    if len(domain) <= len(suffix):
        raise ValueError(f"cannot derive eTLD+1 for domain {domain!r}")
    i = len(domain) - len(suffix) - 1
    if domain[i] != ".":
        raise ValueError(f"invalid public suffix {suffix!r} for domain {domain!r}")
    return domain[domain.rfind(".", 0, i) + 1:]


def domain_parse(domain: str) -> Domain:
    """Split a host name; raises ValueError when it has no registrable part."""
    if not domain or not domain.strip():
        raise ValueError("domain is blank")
    etld1 = _effective_tld_plus_one(domain)
    _, icann = public_suffix(domain)
    name, _, tld = etld1.partition(".")
    rest = domain.removesuffix("." + etld1)
    return Domain(subdomain=rest if rest != domain else "", domain=name, tld=tld, icann=icann)


def domain_parse_from_url(url: str) -> Domain:
    """Split the host name of a URL."""
    return domain_parse(urlsplit(url).hostname or "")


def domain_top(domain: str) -> str:
    """Registrable domain of a host, or an empty string."""
    try:
        parsed = domain_parse(domain)
    except ValueError:
        return ""
    return f"{parsed.domain}.{parsed.tld}"


def domain_top_from_url(url: str) -> str:
    """Registrable domain of a URL's host, or an empty string."""
    try:
        parsed = domain_parse_from_url(url)
    except ValueError:
        return ""
    return f"{parsed.domain}.{parsed.tld}"