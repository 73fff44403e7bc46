"""Static study catalog."""

from typing import List

from pydantic import BaseModel, ConfigDict

from .errors import StudyNotFound


class Study(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    persona: str


STUDIES = (
    Study(
        id="1",
        title="E-commerce checkout experience",
        description="Understand friction points in the checkout flow for repeat customers.",
        persona="Frequent online shoppers",
    ),
    Study(
        id="2",
        title="B2B SaaS onboarding",
        description="Discover how team admins experience onboarding in our B2B product.",
        persona="Mid-market IT admins",
    ),
)


def list_studies() -> List[Study]:
    return list(STUDIES)


def get_study(study_id: str) -> Study:
    for study in STUDIES:
        if study.id == study_id:
            return study
    raise StudyNotFound()
