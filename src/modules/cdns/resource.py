"""CDN resource."""

from sqlalchemy import Select, select

from src.shared.repository import TableResource
from src.shared.resource import FilterColumn, parse_bool, parse_int
from src.shared.validation import Matches, Required, Validator

from .models import CDN
from .schemas import CDNSchema

CDN_NAME_PATTERN = r"[A-Za-z0-9.\-]+"
DOMAIN_NAME_PATTERN = r"(?=.{1,253}$)([A-Za-z0-9]([A-Za-z0-9\-]{0,61}[A-Za-z0-9])?\.)*[A-Za-z0-9]([A-Za-z0-9\-]{0,61}[A-Za-z0-9])?"


class CDNResource(TableResource[CDNSchema]):
    key = "cdns"
    name = "cdn"
    schema = CDNSchema
    model = CDN
    writable_fields = frozenset({"name", "domain_name", "dnssec_enabled"})

    validator = Validator(
        Required("name"),
        Matches("name", CDN_NAME_PATTERN, "invalid characters found - Use alphanumeric . or - ."),
        Required("domain_name"),
        Matches("domain_name", DOMAIN_NAME_PATTERN, "must be a valid hostname"),
        Required("dnssec_enabled"),
    )

    filter_columns = {
        "id": FilterColumn(CDN.id, parse_int, "must be an integer"),
        "name": FilterColumn(CDN.name),
        "domainName": FilterColumn(CDN.domain_name),
        "dnssecEnabled": FilterColumn(CDN.dnssec_enabled, parse_bool, "must be a boolean"),
    }
    default_order = "name"

    def select_query(self) -> Select:
        return select(
            CDN.id,
            CDN.name,
            CDN.domain_name,
            CDN.dnssec_enabled,
            CDN.last_updated,
        )
