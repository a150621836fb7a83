# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""The quote-request and job-application wizards."""

from intake.engine import Step, WizardDefinition

QUOTE_SERVICES = (
    "Foundation Work",
    "Structural Construction",
    "Roofing",
    "Electrical Installation",
    "Plumbing",
    "Interior Finishing",
    "Exterior Finishing",
    "HVAC Systems",
    "Flooring",
    "Painting",
    "Landscaping",
    "Project Management",
    "Architectural Design",
    "Permit Processing",
)

QUOTE = WizardDefinition(
    kind="quote",
    steps=(
        Step("personal", required=("firstName", "lastName", "email", "phone")),
        Step("project", required=("projectType", "projectLocation")),
        Step("services", min_selections=1),
        Step("details", required=("description",)),
    ),
    defaults={
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "company": "",
        "projectType": "",
        "projectLocation": "",
        "propertyType": "",
        "projectSize": "",
        "timeline": "",
        "budget": "",
        "description": "",
        "hasPlans": False,
        "needsDesign": False,
        "preferredContact": "email",
        "preferredTime": "morning",
    },
    options=QUOTE_SERVICES,
)

APPLICATION = WizardDefinition(
    kind="application",
    steps=(
        Step("applicant", required=("fullName", "email", "phone")),
        Step("position", required=("position",)),
        Step("documents"),
    ),
    defaults={
        "fullName": "",
        "email": "",
        "phone": "",
        "position": "",
        "experience": "",
        "coverLetter": "",
    },
)

WIZARDS = {w.kind: w for w in (QUOTE, APPLICATION)}
