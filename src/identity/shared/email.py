"""EmailAddress value object for validated email addresses."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


@identity.value_object
class EmailAddress:
    """A syntactically valid email address: local part, @, domain with a TLD of two or more letters."""

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        if self.address is not None and not _EMAIL_PATTERN.match(self.address):
            raise ValidationError({"email": [f"Invalid email address: {self.address!r}"]})
