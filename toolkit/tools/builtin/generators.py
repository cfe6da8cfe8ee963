"""Generators: passwords."""
import secrets
import string

from ..registry import FieldConstraints, FieldDescriptor, ToolSet

tools = ToolSet("generators")


@tools.tool(
    "password-generator",
    "Password Generator",
    description="Generate strong random passwords",
    icon="🔐",
    fields=[
        FieldDescriptor("length", "Length", "range", default_value=16, constraints=FieldConstraints(min=8, max=64, step=1)),
        FieldDescriptor("symbols", "Include symbols", "checkbox", default_value=True),
        FieldDescriptor("digits", "Include numbers", "checkbox", default_value=True),
    ],
)
def password_generator(data):
    alphabet = string.ascii_letters
    if data["digits"]:
        alphabet += string.digits
    if data["symbols"]:
        alphabet += "!@#$%^&*()-_=+[]{}"
    length = data["length"] or 16
    return "".join(secrets.choice(alphabet) for _ in range(length))
