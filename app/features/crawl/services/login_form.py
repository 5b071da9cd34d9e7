from bs4 import Tag

FORM_KEYWORDS = ("login", "signin", "auth")
FORM_ATTRIBUTES = ("id", "class", "name")

IDENTITY_INPUT_TYPES = {"text", "email"}
IDENTITY_KEYWORDS = ("user", "email", "login")


def attribute_text(tag: Tag, name: str) -> str:
    """Attribute value as one string, whatever the tree builder stored."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _contains_any(value: str, keywords) -> bool:
    return any(keyword in value for keyword in keywords)


def is_login_form(form: Tag) -> bool:
    """
    Decide whether a <form> looks like a login form.

    A login-ish id/class/name on the form itself settles it. Otherwise the
    form needs both a password input and a text/email input whose name or id
    mentions user, email or login.
    """
    for attr in FORM_ATTRIBUTES:
        if _contains_any(attribute_text(form, attr).lower(), FORM_KEYWORDS):
            return True

    has_password = False
    has_identity = False

    for field in form.find_all("input"):
        input_type = attribute_text(field, "type").lower()

        if input_type == "password":
            has_password = True
        elif input_type in IDENTITY_INPUT_TYPES:
            name = attribute_text(field, "name").lower()
            input_id = attribute_text(field, "id").lower()
            if _contains_any(name, IDENTITY_KEYWORDS) or _contains_any(input_id, IDENTITY_KEYWORDS):
                has_identity = True

    return has_password and has_identity
