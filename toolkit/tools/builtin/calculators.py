"""Financial calculators: tips, mortgages, percentages."""
from ..registry import FieldConstraints, FieldDescriptor, FieldOption, ToolSet

tools = ToolSet("calculators")


@tools.tool(
    "tip-calculator",
    "Tip Calculator",
    description="Calculate tips and split bills among multiple people",
    icon="💰",
    fields=[
        FieldDescriptor("bill", "Bill Amount ($)", "number", required=True,
                        constraints=FieldConstraints(min=0, step=0.01)),
        FieldDescriptor("tipPercent", "Tip Percentage (%)", "number", required=True, default_value=18,
                        constraints=FieldConstraints(min=0, step=0.1)),
        FieldDescriptor("people", "Number of People", "number", required=True, default_value=1,
                        constraints=FieldConstraints(min=1, step=1)),
    ],
)
def tip_calculator(data):
    bill = data["bill"]
    tip = bill * data["tipPercent"] / 100
    total = bill + tip
    people = data["people"]
    return {
        "total": total,
        "amount": tip,
        "amountDescription": f"{data['tipPercent']:g}% tip",
        "perPerson": round(total / people, 2),
        "tipPerPerson": round(tip / people, 2),
    }


@tools.tool(
    "mortgage-calculator",
    "Mortgage Calculator",
    description="Calculate monthly mortgage payments and a yearly amortization schedule",
    icon="🏠",
    fields=[
        FieldDescriptor("principal", "Loan Amount ($)", "number", required=True,
                        constraints=FieldConstraints(min=0, step=1000)),
        FieldDescriptor("rate", "Annual Interest Rate (%)", "number", required=True,
                        constraints=FieldConstraints(min=0, step=0.01)),
        FieldDescriptor("years", "Loan Term (years)", "number", required=True, default_value=30,
                        constraints=FieldConstraints(min=1, max=50, step=1)),
        FieldDescriptor("downPayment", "Down Payment ($)", "number", default_value=0,
                        constraints=FieldConstraints(min=0, step=1000)),
    ],
)
def mortgage_calculator(data):
    loan = data["principal"] - (data.get("downPayment") or 0)
    if loan <= 0:
        raise ValueError("Down payment must be smaller than the loan amount")
    monthly_rate = data["rate"] / 100 / 12
    months = data["years"] * 12

    if monthly_rate == 0:
        payment = loan / months
    else:
        growth = (1 + monthly_rate) ** months
        payment = loan * monthly_rate * growth / (growth - 1)

    schedule = []
    balance = loan
    for year in range(1, data["years"] + 1):
        paid_principal = paid_interest = 0.0
        for _ in range(12):
            interest = balance * monthly_rate
            principal = min(payment - interest, balance)
            balance -= principal
            paid_principal += principal
            paid_interest += interest
        schedule.append({
            "year": year,
            "principal": round(paid_principal, 2),
            "interest": round(paid_interest, 2),
            "balance": round(max(balance, 0.0), 2),
        })

    return {
        "monthlyPayment": round(payment, 2),
        "totalPaid": round(payment * months, 2),
        "totalInterest": round(payment * months - loan, 2),
        "schedule": schedule,
    }


@tools.tool(
    "percentage-calculator",
    "Percentage Calculator",
    description="Work out X% of a number, or what percent one number is of another",
    icon="📊",
    fields=[
        FieldDescriptor("mode", "Calculation", "select", required=True, default_value="of", options=[
            FieldOption("of", "X% of Y"),
            FieldOption("is", "X is what % of Y"),
        ]),
        FieldDescriptor("x", "X", "number", required=True, constraints=FieldConstraints(step="any")),
        FieldDescriptor("y", "Y", "number", required=True, constraints=FieldConstraints(step="any")),
    ],
)
def percentage_calculator(data):
    x, y = data["x"], data["y"]
    if data["mode"] == "of":
        return x * y / 100
    if y == 0:
        raise ValueError("Y must not be zero")
    return f"{x / y * 100:.2f}%"
