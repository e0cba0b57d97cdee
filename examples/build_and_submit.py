#!/usr/bin/env python3
"""
Build a small form, fill it in, and export the response.

Usage:
    python examples/build_and_submit.py
"""

import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from formcraft import FormBuilder, FormSubmission, create_default_registry, export_responses_csv


def main():
    registry = create_default_registry()

    builder = FormBuilder(registry)
    name = builder.add_field("text", label="Name", required=True, validation={"minLength": 2})
    email = builder.add_field("email", label="Email", required=True)
    topics = builder.add_field(
        "checkbox",
        label="Topics",
        options=[
            {"label": "Python", "value": "python"},
            {"label": "Forms", "value": "forms"},
        ],
    )
    visit = builder.add_field("date", label="Visit date", validation={"min": "2024-01-01"})

    print("Fields, in order:")
    for field in builder.fields:
        print(f"  {field.id}  {field.type:<9} {field.label}")

    submission = FormSubmission(registry, builder.fields, form_id="demo")
    submission.change(name.id, "A")
    submission.blur(name.id)
    print(f"\nAfter typing 'A' into Name: {submission.errors}")

    submission.change(name.id, "Ada")
    submission.change(email.id, "ada@example.com")
    submission.change(topics.id, ["python"])
    submission.change(visit.id, "2024-06-01")

    outcome = submission.submit()
    if not outcome.submitted:
        print(f"Blocked: {outcome.validation.errors}")
        return

    print("\nResponse record:")
    print(json.dumps(outcome.response.to_storage(), indent=2))
    print("\nCSV export:")
    print(export_responses_csv([outcome.response], builder.fields))


if __name__ == "__main__":
    main()
