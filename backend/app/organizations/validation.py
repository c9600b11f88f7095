"""Write-time validation of organization data.

Each check raises OrganizationValidationError with a message fit for display.
"""

from collections.abc import Iterable, Sequence

from backend.app.models.organization import (
    BasicInformation,
    ContactInformation,
    LocalizedText,
    PostalAddresses,
    VisitingAddress,
)

from .exceptions import OrganizationValidationError


def validate_languages(
    field_name: str, texts: Iterable[LocalizedText], language_codes: Sequence[str]
) -> None:
    """Every localized text must use a configured data language, once."""
    seen: set[str] = set()
    for text in texts:
        if text.language_code not in language_codes:
            raise OrganizationValidationError(
                f"Unsupported language '{text.language_code}' in {field_name}."
            )
        if text.language_code in seen:
            raise OrganizationValidationError(
                f"Language '{text.language_code}' given twice in {field_name}."
            )
        seen.add(text.language_code)


def validate_basic_information(
    info: BasicInformation,
    language_codes: Sequence[str],
    primary_language: str,
    municipality_type: str,
) -> None:
    """
    Validate identity, names, type and validity window.

    Args:
        info: Submitted basic information
        language_codes: Allowed data languages
        primary_language: Language every organization must be named in
        municipality_type: Type value that requires a municipality code

    Raises:
        OrganizationValidationError: On the first problem found
    """
    if not info.business_id.strip():
        raise OrganizationValidationError("Business id is required.")
    if not info.type.strip():
        raise OrganizationValidationError("Organization type is required.")

    validate_languages("names", info.names, language_codes)
    validate_languages("descriptions", info.descriptions, language_codes)
    validate_languages("name abbreviations", info.name_abbreviations, language_codes)

    primary_name = info.name_in(primary_language)
    if primary_name is None or not primary_name.strip():
        raise OrganizationValidationError(
            f"Organization name in language '{primary_language}' is required."
        )

    if info.type == municipality_type and not (info.municipality_code or "").strip():
        raise OrganizationValidationError(
            "Municipality code is required for municipality organizations."
        )

    if (
        info.valid_from is not None
        and info.valid_to is not None
        and info.valid_from > info.valid_to
    ):
        raise OrganizationValidationError("Validity start cannot be after validity end.")


def validate_contact_information(
    contact: ContactInformation, language_codes: Sequence[str]
) -> None:
    """A phone number needs a call charge type; texts must use data languages."""
    if contact.phone_number and not contact.call_charge_type:
        raise OrganizationValidationError(
            "Call charge type is required when a phone number is given."
        )
    validate_languages("call charge infos", contact.call_charge_infos, language_codes)
    validate_languages("homepage urls", contact.homepage_urls, language_codes)


def validate_visiting_address(
    address: VisitingAddress, language_codes: Sequence[str]
) -> None:
    if address.street_addresses and not address.postal_code:
        raise OrganizationValidationError(
            "Postal code is required for the visiting address."
        )
    validate_languages("street addresses", address.street_addresses, language_codes)
    validate_languages("postal districts", address.postal_districts, language_codes)
    validate_languages("address qualifiers", address.qualifiers, language_codes)


def validate_postal_addresses(
    addresses: PostalAddresses, language_codes: Sequence[str]
) -> None:
    street = addresses.street_address
    if street is not None:
        if street.street_addresses and not street.postal_code:
            raise OrganizationValidationError(
                "Postal code is required for the postal street address."
            )
        validate_languages("postal street addresses", street.street_addresses, language_codes)
        validate_languages("postal districts", street.postal_districts, language_codes)

    box = addresses.post_office_box_address
    if box is not None:
        if not box.post_office_box.strip() or not box.postal_code:
            raise OrganizationValidationError(
                "Post office box and its postal code are required."
            )
        validate_languages("post office box districts", box.postal_districts, language_codes)
