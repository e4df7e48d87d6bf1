from utils.db import mongo
from datetime import datetime
from utils.errors import ValidationFailure

COHORT_YEARS = ("first-year", "second-year", "third-year", "final-year")

COHORT_LABELS = {
    "first-year": "First Year",
    "second-year": "Second Year",
    "third-year": "Third Year",
    "final-year": "Final Year",
}


def normalize_section_name(name):
    if name is None:
        return ""
    if not isinstance(name, str):
        raise ValidationFailure("Section name must be text")
    return name.strip().upper()


class Section:

    @staticmethod
    def collection():
        return mongo.db.sections

    def __init__(self, year, name, created_at=None):
        self.year = year
        self.name = normalize_section_name(name)
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "year": self.year,
            "name": self.name,
            "created_at": self.created_at
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def names_for_year(year):
        docs = Section.collection().find({"year": year}).sort("name", 1)
        return [d["name"] for d in docs]

    @staticmethod
    def find(year, name):
        return Section.collection().find_one({"year": year, "name": normalize_section_name(name)})

    # Create the section if this (year, name) has not been seen yet
    @staticmethod
    def ensure(year, name):
        name = normalize_section_name(name)
        return Section.collection().find_one_and_update(
            {"year": year, "name": name},
            {"$setOnInsert": {"created_at": datetime.utcnow()}},
            upsert=True
        )

    @staticmethod
    def delete(year, name):
        return Section.collection().delete_one({"year": year, "name": normalize_section_name(name)})
