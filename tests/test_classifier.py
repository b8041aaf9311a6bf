import pytest

from core.classifier import TaskClassifier
from models import ExternalSection, ExternalTask


def test_documentation_prefixes_are_case_insensitive_and_trimmed():
    classifier = TaskClassifier()
    assert classifier.is_documentation_task("[ADLI: Approach] How We Do It")
    assert classifier.is_documentation_task("   [adli: integration] How It Connects")
    assert classifier.is_documentation_task("Approach: review evidence base")
    assert not classifier.is_documentation_task("Review the approach")
    assert not classifier.is_documentation_task("")
    assert not classifier.is_documentation_task(None)


def test_documentation_dimension():
    classifier = TaskClassifier()
    assert classifier.documentation_dimension("[ADLI: Learning] How We Improve") == "learning"
    assert classifier.documentation_dimension("Plan kickoff") is None


@pytest.mark.parametrize(
    "section, expected",
    [
        ("Plan", "plan"),
        ("EXECUTE", "execute"),
        ("  evaluate ", "evaluate"),
        ("Improve", "improve"),
        ("Backlog", "plan"),
        ("", "plan"),
        (None, "plan"),
    ],
)
def test_section_to_category(section, expected):
    assert TaskClassifier().category_for_section(section) == expected


def test_injected_tables_replace_defaults():
    classifier = TaskClassifier(
        doc_patterns={"[doc]": "approach"},
        section_categories={"Doing": "execute", "Done": "evaluate"},
    )
    assert classifier.is_documentation_task("[DOC] generated")
    assert not classifier.is_documentation_task("[ADLI: Approach] How We Do It")
    assert classifier.category_for_section("doing") == "execute"
    assert classifier.category_for_section("Plan") == "plan"


def test_unknown_category_in_table_is_rejected():
    with pytest.raises(ValueError):
        TaskClassifier(section_categories={"Ship": "deploy"})
    with pytest.raises(ValueError):
        TaskClassifier(default_category="later")


def test_find_documentation_tasks_keeps_first_match():
    sections = [
        ExternalSection(
            gid="s1",
            name="Plan",
            tasks=[
                ExternalTask(gid="t1", name="[ADLI: Approach] How We Do It", notes="first"),
                ExternalTask(gid="t2", name="Regular task"),
            ],
        ),
        ExternalSection(
            gid="s2",
            name="Execute",
            tasks=[
                ExternalTask(gid="t3", name="[adli: approach] duplicate", notes="second"),
                ExternalTask(gid="t4", name="[ADLI: Deployment] How We Roll It Out", notes="rollout"),
            ],
        ),
    ]
    found = TaskClassifier().find_documentation_tasks(sections)
    assert found == {
        "approach": {"gid": "t1", "notes": "first"},
        "deployment": {"gid": "t4", "notes": "rollout"},
    }
