"""Static lookup tables standing in for framework introspection.

These are the tables a running application would normally derive by
reflecting its template global providers, field classes and list classes.
They are kept as plain data so analysis never needs the host framework.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Global accessors: available in every scope, never user data
# ---------------------------------------------------------------------------

BASE_GLOBAL_ACCESSORS = (
    "Up",
    "Top",
    "Me",
    "AbsoluteBaseURL",
    "BaseURL",
    "BaseHref",
    "CurrentMember",
    "CurrentUser",
    "CurrentPage",
    "SiteConfig",
    "Now",
    "i18nLocale",
    "i18nScriptDirection",
    "ThemeDir",
    "RequirementsInclude",
)

# Content page context: page hierarchy, navigation and fixed record fields.
SITE_TREE_ACCESSORS = (
    "Menu",
    "Children",
    "AllChildren",
    "Parent",
    "Level",
    "Breadcrumbs",
    "Link",
    "AbsoluteLink",
    "RelativeLink",
    "LinkingMode",
    "LinkOrCurrent",
    "LinkOrSection",
    "InSection",
    "IsSection",
    "IsCurrent",
    "Title",
    "MenuTitle",
    "MetaTitle",
    "MetaDescription",
    "MetaTags",
    "Content",
    "URLSegment",
    "ShowInMenus",
    "ShowInSearch",
    "Sort",
    "ClassName",
    "ID",
    "ParentID",
    "Created",
    "LastEdited",
    "Form",
)

# Outbound message context: header fields exposed to every email template.
EMAIL_ACCESSORS = (
    "To",
    "Cc",
    "Bcc",
    "From",
    "Subject",
    "Body",
    "BaseURL",
    "IsEmail",
)

# ---------------------------------------------------------------------------
# Field methods: lowercase method name -> field type it implies
# ---------------------------------------------------------------------------

FIELD_METHODS: dict[str, str] = {
    # Date / time
    "nice": "Date",
    "ago": "Date",
    "format": "Date",
    "dayofmonth": "Date",
    "dayofweek": "Date",
    "month": "Date",
    "shortmonth": "Date",
    "year": "Date",
    "long": "Date",
    "full": "Date",
    "rangestring": "Date",
    "inpast": "Date",
    "infuture": "Date",
    "istoday": "Date",
    "time": "Time",
    "time12": "Time",
    "time24": "Time",
    # Text
    "limitcharacters": "Text",
    "limitwordcount": "Text",
    "limitsentences": "Text",
    "firstsentence": "Text",
    "firstparagraph": "Text",
    "contextsummary": "Text",
    "bigsummary": "Text",
    "summary": "HTMLText",
    "lowercase": "Varchar",
    "uppercase": "Varchar",
    "xml": "Varchar",
    "js": "Varchar",
    "att": "Varchar",
    "raw": "Varchar",
    # Numbers
    "whole": "Currency",
    "formatted": "Decimal",
    "nullifempty": "Int",
    # Image generators
    "setwidth": "Image",
    "setheight": "Image",
    "setsize": "Image",
    "setratiosize": "Image",
    "croppedimage": "Image",
    "paddedimage": "Image",
    "fill": "Image",
    "fit": "Image",
    "pad": "Image",
    "scalewidth": "Image",
    "scaleheight": "Image",
    # File getters
    "url": "File",
    "absoluteurl": "File",
    "filename": "File",
    "extension": "File",
    "size": "File",
    "filetype": "File",
}

# ---------------------------------------------------------------------------
# Collection methods: lowercase names valid on any iterated list
# ---------------------------------------------------------------------------

COLLECTION_METHODS = (
    "first",
    "last",
    "middle",
    "firstlast",
    "pos",
    "fromend",
    "totalitems",
    "count",
    "exists",
    "even",
    "odd",
    "evenodd",
    "modulus",
    "multipleof",
    "iteratorpos",
    "limit",
    "sort",
    "filter",
    "filterany",
    "exclude",
    "find",
    "column",
    "map",
    "reverse",
    "toarray",
    "groupedby",
)

# ---------------------------------------------------------------------------
# Type inference: ordered (substring pattern, type) rules
# ---------------------------------------------------------------------------

INFER_DATATYPE_RULES: tuple[tuple[str, str], ...] = (
    ("Date", "Date"),
    ("Time", "Time"),
    ("Image", "Image"),
    ("Photo", "Image"),
    ("Picture", "Image"),
    ("Logo", "Image"),
    ("File", "File"),
    ("Document", "File"),
    ("Content", "HTMLText"),
    ("Description", "HTMLText"),
    ("Body", "HTMLText"),
    ("Price", "Currency"),
    ("Cost", "Currency"),
    ("Amount", "Currency"),
    ("Count", "Int"),
    ("Number", "Int"),
    ("Quantity", "Int"),
    ("Email", "Varchar"),
    ("Phone", "Varchar"),
    ("URL", "Varchar"),
    ("Link", "Varchar"),
)

DEFAULT_DATATYPE = "Text"
BOOLEAN_DATATYPE = "Boolean"
RELATION_DATATYPE = "has_one"

# ---------------------------------------------------------------------------
# Known data-bearing classes in the host type catalog
# ---------------------------------------------------------------------------

KNOWN_TYPES = (
    "File",
    "Image",
    "Folder",
    "Member",
    "Group",
    "SiteTree",
    "Page",
    "SiteConfig",
    "VirtualPage",
    "RedirectorPage",
    "ErrorPage",
)
