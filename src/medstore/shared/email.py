"""EmailAddress value object for validated, normalized email addresses."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from medstore.domain import medstore

_LOCAL_PART = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+$")
_DOMAIN_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")


@medstore.value_object(part_of="User")
class EmailAddress:
    """An email address in its canonical lower-case form.

    Only structural checks are made: one ``@``, a non-empty local part without
    leading, trailing or doubled dots, and a dotted domain whose labels do not
    start or end with a hyphen.
    """

    address: String(required=True, max_length=254)

    @classmethod
    def normalize(cls, raw):
        return cls(address=(raw or "").strip().lower())

    @invariant.post
    def address_must_be_well_formed(self):
        email = self.address
        invalid = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)
        if not local_part or not _LOCAL_PART.match(local_part):
            raise invalid
        if local_part.startswith(".") or local_part.endswith(".") or ".." in local_part:
            raise invalid

        labels = domain_part.split(".")
        if len(labels) < 2 or not all(_DOMAIN_LABEL.match(label) for label in labels):
            raise invalid
