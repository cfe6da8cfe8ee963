"""Health & fitness calculators."""
from ..registry import FieldConstraints, FieldDescriptor, FieldOption, ToolSet

tools = ToolSet("health")

BMI_CATEGORIES = [
    (18.5, "Underweight", "Below normal weight"),
    (25.0, "Normal", "Healthy weight"),
    (30.0, "Overweight", "Above normal weight"),
]


def bmi_category(bmi: float):
    for limit, category, status in BMI_CATEGORIES:
        if bmi < limit:
            return category, status
    return "Obese", "Well above normal weight"


@tools.tool(
    "bmi-calculator",
    "BMI Calculator",
    description="Calculate Body Mass Index and health status",
    icon="⚖️",
    fields=[
        FieldDescriptor("weight", "Weight", "number", required=True, constraints=FieldConstraints(min=0, step=0.1)),
        FieldDescriptor("height", "Height", "number", required=True, constraints=FieldConstraints(min=0, step=0.1)),
        FieldDescriptor("unit", "Unit System", "select", required=True, default_value="metric", options=[
            FieldOption("metric", "Metric (kg, cm)"),
            FieldOption("imperial", "Imperial (lbs, inches)"),
        ]),
    ],
)
def bmi_calculator(data):
    weight, height = data["weight"], data["height"]
    if height <= 0:
        raise ValueError("Height must be greater than zero")
    if data["unit"] == "imperial":
        bmi = weight * 703 / height ** 2
    else:
        bmi = weight / (height / 100) ** 2
    category, status = bmi_category(bmi)
    return {
        "bmi": bmi,
        "bmiDescription": status,
        "category": category,
    }
