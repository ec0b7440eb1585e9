from __future__ import annotations

from resume_tailor.schemas.analysis import CompanyResearchResult

WELL_KNOWN_COMPANIES: frozenset[str] = frozenset(
    {
        # Tech
        "google",
        "apple",
        "microsoft",
        "amazon",
        "meta",
        "facebook",
        "netflix",
        "tesla",
        "nvidia",
        "intel",
        "ibm",
        "oracle",
        "salesforce",
        "adobe",
        "uber",
        "lyft",
        "airbnb",
        "spotify",
        "twitter",
        "x",
        "linkedin",
        "github",
        "stripe",
        "square",
        "paypal",
        "shopify",
        "twilio",
        "atlassian",
        "zoom",
        "slack",
        "dropbox",
        "snap",
        "pinterest",
        "reddit",
        "discord",
        # Finance
        "goldman sachs",
        "morgan stanley",
        "jp morgan",
        "jpmorgan",
        "citibank",
        "bank of america",
        "wells fargo",
        "blackrock",
        "fidelity",
        "vanguard",
        # Consulting
        "mckinsey",
        "bain",
        "bcg",
        "boston consulting",
        "deloitte",
        "accenture",
        "pwc",
        "kpmg",
        "ey",
        "ernst & young",
        # Consumer and healthcare
        "walmart",
        "target",
        "costco",
        "nike",
        "coca-cola",
        "pepsi",
        "procter & gamble",
        "johnson & johnson",
        "pfizer",
        "moderna",
    }
)


def is_well_known_company(company_name: str) -> bool:
    return company_name.strip().lower() in WELL_KNOWN_COMPANIES


def research_company(company_name: str) -> CompanyResearchResult:
    """Local company-familiarity lookup.

    Well-known employers need no explanation. Anything else gets the company
    name as a placeholder context that ``add_company_context`` rule actions
    can replace.
    """
    name = company_name.strip()
    if is_well_known_company(name):
        return CompanyResearchResult(company_name=name, is_well_known=True, size="enterprise", context="")
    return CompanyResearchResult(company_name=name, is_well_known=False, size="unknown", context=name)
