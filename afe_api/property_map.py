# ============================================================================
# MODULE CONTEXT - AFE PROPERTY MAP
# ============================================================================
# STATUS: Standalone Module - Static attribute lookup tables
# PURPOSE: Attribute GUID -> field name tables for the content database EAV schema
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFE_CLASS_GUIDS, SUMMARY_PROPERTIES, CREATOR_PROPERTIES, PROPERTY_FIELD_MAP,
#          DETAIL_FIELDS, NUMERIC_FIELDS, normalize_guid, field_for_property
# DEPENDENCIES: types, uuid
# ============================================================================

"""
AFE Property Map

The content database stores every AFE as a `tblContent` row plus one
`tblProperty_Strings` row per attribute. These tables name the attributes
the API reads.

Field names were taken from observed data, so a few look like duplicates
(`originator` / `originator_name`) or are generic (`boolean_flag_N`). They
are kept as-is until the vendor publishes a schema.

All GUID keys are upper-case canonical strings; use `normalize_guid` before
looking anything up.
"""

import uuid
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


def normalize_guid(value: Any) -> Optional[str]:
    """
    Canonical upper-case GUID string.

    The driver returns UNIQUEIDENTIFIER columns as `uuid.UUID`; other
    sources hand back strings in either case, sometimes with braces.
    """
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value).upper()
    return str(value).strip().strip("{}").upper()


# Content classes that hold AFE records (original AFEs and supplements)
AFE_CLASS_GUIDS: Tuple[str, ...] = (
    "55119960-A633-4AD8-810D-379049A25BE7",
    "1432A221-87A6-4C04-9CE9-5CE3DBB11125",
    "E6BF8767-C57B-4010-868C-B6FA0D99AAC9",
    "26B04FD9-8C60-4C21-A4A7-1EEE265C8D78",
    "1E50BFB1-2B93-4BCD-AB6B-27BC44D75E2A",
)

# Attributes joined onto each AFE row by the list and text-search queries.
# Key is the result column label.
SUMMARY_PROPERTIES: Mapping[str, str] = MappingProxyType({
    "status": "2A13D0BA-6756-4E39-A7A9-828D52E603A8",               # afe_status_text
    "type": "821378BD-083B-449D-814F-9CB3F8317B33",                 # afe_type
    "area": "BEEC4906-50CD-47AA-B9AB-BA9ECD867C69",
    "name": "C0B60CE9-8A89-4303-B699-C4C389095A30",
    "surface_location": "89EB0825-83C8-4E65-A674-D93DA2258EB6",
    "gross_budget": "031F3106-118D-440C-8487-4FCDDB6AE45A",
    "net_budget": "11A4FF9F-A703-432E-9D41-67B6DB44F857",
    "working_interest_pct": "6E3A4E36-4C74-4620-8B9B-C0A7B7754AB8",
    "approval_status": "8932EB93-DC6F-486F-A322-0E42FFB49CA0",
    "date_created": "EE38FF03-9C22-4DFB-89E4-8953BC2611E4",
    "company": "08575A2C-5B4A-4D1D-9459-003D6FCCDEDA",
})

# Attributes of the publishing user's own content row
CREATOR_PROPERTIES: Mapping[str, str] = MappingProxyType({
    "first_name": "A52BB910-4798-4916-816F-CA895F78DD55",
    "last_name": "C15AEF9B-52D6-4052-8BF6-92F92B85A4DE",
})

# Fields exposed by the list / search-text endpoints, in response order
SUMMARY_FIELDS: Tuple[str, ...] = (
    "afe_number",
    "status",
    "type",
    "area",
    "name",
    "surface_location",
    "gross_budget",
    "net_budget",
    "working_interest_pct",
)

# Every attribute flattened by the bulk detail endpoint
PROPERTY_FIELD_MAP: Mapping[str, str] = MappingProxyType({
    # Identifiers
    "18923387-E8BA-45E7-AE7F-ABEA2C7C0E62": "afe_number_full",
    "B752F427-C4D7-4E86-94BA-67346D790D5F": "afe_number_base",

    # Header fields
    "08575A2C-5B4A-4D1D-9459-003D6FCCDEDA": "company",
    "C0B60CE9-8A89-4303-B699-C4C389095A30": "name",
    "821378BD-083B-449D-814F-9CB3F8317B33": "afe_type",
    "419B8872-E9C9-4EBE-8BCB-58783F5DE96A": "is_preliminary",
    "C55E4ED1-41FB-42F5-968A-D0C9195D3897": "operator",
    "157B539D-0BD4-4E82-A032-EECCB0181A45": "province",
    "BEEC4906-50CD-47AA-B9AB-BA9ECD867C69": "area",
    "38C19027-7E69-45DE-901E-85091DF9AD35": "expenditure_line",
    "89EB0825-83C8-4E65-A674-D93DA2258EB6": "surface_location",  # usually set on supplements
    "52E32478-CD61-4E71-ABEA-870BADB108D7": "cost_center",
    "A986BA3D-6266-48DF-8D96-7DAA539A8104": "managing_org",
    "06B6DE12-1573-4A5C-810C-402C1A686631": "managing_org_id",
    "C35A8269-3EBD-43CE-8E5D-C3A862441587": "qbyte_reference",
    "4DF2C006-C3D8-4D23-B235-96A46D80B85D": "project_name",
    "ED52424F-C301-43F9-A991-C05E4944D101": "justification",

    # Key dates
    "8D02DA53-DABF-4D28-8D0B-4E9F62D8D5AD": "fiscal_year",
    "EE38FF03-9C22-4DFB-89E4-8953BC2611E4": "date_created",
    "B65AC416-49C1-4ED8-8A8D-F7310D208AD7": "estimated_start",
    "27139ECE-4EF2-4402-ABEB-6E29357B769D": "estimated_completion",
    "AD9D3606-E1E9-44A2-887F-A79B0141019F": "submitted_for_approval",

    # Totals
    "6E3A4E36-4C74-4620-8B9B-C0A7B7754AB8": "working_interest_pct",
    "C1102A35-AC8F-4AF1-A21B-BF2D6E782CF9": "working_interest_ratio",
    "031F3106-118D-440C-8487-4FCDDB6AE45A": "gross_budget",
    "11A4FF9F-A703-432E-9D41-67B6DB44F857": "net_budget",
    "80434A42-7530-411E-BD67-78D3B49A5A5B": "total_gross",
    "51A1C179-9C32-4C71-A298-BC4633EA941C": "total_net",

    # Workflow / approval
    "8932EB93-DC6F-486F-A322-0E42FFB49CA0": "approval_status",
    "2A13D0BA-6756-4E39-A7A9-828D52E603A8": "afe_status_text",   # e.g. Transferred
    "F125D2FB-66F3-4405-BA23-54FA800AD3D9": "afe_status_lock",

    # Percentages
    "7B20F627-EB8C-4CFA-97BA-9CAFA4402F7F": "bpo_percent",
    "D61790B1-3FF0-4824-A280-B0A53C5BB5EE": "apo_percent",

    # Detail view extras
    "088F82A7-A7A7-43CC-A123-572C30271F37": "originator",
    "1A15F1F7-9312-4ADE-89AB-6BA428ABF36D": "originator_name",
    "DE3D08EE-6990-41C2-A8F6-A932491360C3": "operator_afe_number",
    "064A103F-131D-4ED8-AA1C-F8D3D94676DC": "province_code",
    "53619C9B-1ED7-4F25-8058-10F686EC9E06": "afe_supplement_type",
    "4B1E9761-B506-4CF9-883C-2E8A05CF41DC": "afe_supplement_id",
    "55B8021F-2DF6-4532-AE96-47FDC0AF1C09": "percentage_100",
    "5ABE7EB2-3EB5-4687-B02A-48C7D3C02EF8": "amount_100000",
    "A67E05AC-2850-4F23-ADD2-488CE4968060": "is_active_flag",
    "FBBA6BA8-F07D-4DD8-A3E9-71A7FE60C1E9": "boolean_flag_1",
    "37C821E4-3378-407A-B4FD-851B50CBEAF7": "boolean_flag_2",
    "D94B9621-9E3C-4082-8C50-68090E2B795E": "boolean_flag_3",
    "636149C1-0C4E-42A2-B6E2-FCE402F0A151": "boolean_flag_4",
    "E97E642D-E110-4C6C-A54A-F268E2C2D373": "boolean_flag_5",
    "4B85D2F4-E3C3-4821-A3D6-FFB95A97AF01": "percentage_field",
    "7E4A247D-FC0F-4B83-99BA-9E954361FD1E": "linked_content_guid",
    "52C9B580-91BE-4DA3-95BB-7A65C1995CF5": "linked_guid_2",
    "28AAD120-7E14-46D4-9BEE-8D3494EC01E3": "sequence_number",
    "E3223C16-759F-400C-9008-109CD1FD4298": "zero_value",
    "D502D598-7891-4C24-B6F2-37BF500BA05F": "zero_value_2",
})

# Output field order of a detail record
DETAIL_FIELDS: Tuple[str, ...] = ("afe_number",) + tuple(PROPERTY_FIELD_MAP.values())

# Detail fields holding decimal text
NUMERIC_FIELDS = frozenset({
    "working_interest_pct",
    "working_interest_ratio",
    "gross_budget",
    "net_budget",
    "total_gross",
    "total_net",
    "bpo_percent",
    "apo_percent",
    "percentage_100",
    "amount_100000",
    "percentage_field",
})


def field_for_property(property_guid: Any) -> Optional[str]:
    """Output field for an attribute id, or None when it is not mapped."""
    return PROPERTY_FIELD_MAP.get(normalize_guid(property_guid))
