from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

JobOutlook = Literal["much_faster", "faster", "average", "slower", "declining"]
EntryRequirement = Literal["certificate", "associates", "bachelors", "masters"]


@dataclass(frozen=True, slots=True)
class CareerOption:
    title: str
    occupation_code: str
    salary_low: int
    salary_median: int
    salary_high: int
    job_outlook: JobOutlook
    outlook_percent: int
    entry_requirement: EntryRequirement
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "occupation_code": self.occupation_code,
            "typical_salary_range": {
                "low": self.salary_low,
                "median": self.salary_median,
                "high": self.salary_high,
            },
            "job_outlook": self.job_outlook,
            "outlook_percent": self.outlook_percent,
            "entry_requirement": self.entry_requirement,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class CareerPathway:
    major_keywords: tuple[str, ...]
    field_title: str
    field_description: str
    careers: tuple[CareerOption, ...]
    transfer_tip: str | None = None
    first_gen_note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "major_keywords": list(self.major_keywords),
            "field_title": self.field_title,
            "field_description": self.field_description,
            "careers": [career.to_dict() for career in self.careers],
            "transfer_tip": self.transfer_tip,
            "first_gen_note": self.first_gen_note,
        }


CAREER_PATHWAYS: tuple[CareerPathway, ...] = (
    CareerPathway(
        major_keywords=(
            "civil engineering",
            "construction",
            "building technology",
            "building construction",
            "surveying",
            "engineering technology",
            "construction management",
        ),
        field_title="Civil Engineering & Construction Technology",
        field_description=(
            "Civil engineers and construction managers design, build and oversee roads, bridges, "
            "water systems and buildings. Demand is steady and 2-year programs lead to professional licensure."
        ),
        careers=(
            CareerOption("Civil Engineering Technologist", "17-3022", 42_000, 57_000, 78_000, "average", 3, "associates",
                         "Support civil engineers in planning and designing infrastructure projects."),
            CareerOption("Construction Manager", "11-9021", 65_000, 104_000, 169_000, "faster", 8, "bachelors",
                         "Plan, coordinate and supervise construction projects."),
            CareerOption("Civil Engineer", "17-2051", 60_000, 95_000, 144_000, "average", 6, "bachelors",
                         "Design and oversee infrastructure projects. Senior roles require a P.E. license."),
            CareerOption("Surveying & Mapping Technician", "17-3031", 35_000, 48_000, 67_000, "average", 3, "associates",
                         "Measure and map land and structures after a certificate or 2-year A.S."),
            CareerOption("Building Inspector", "47-4011", 42_000, 62_000, 92_000, "average", 3, "certificate",
                         "Inspect buildings and construction sites for code compliance."),
            CareerOption("Construction Estimator", "13-1051", 50_000, 73_000, 112_000, "average", 5, "associates",
                         "Estimate the costs of residential and commercial construction projects."),
        ),
        transfer_tip="An A.S. in Engineering Technology often transfers to a state university with junior standing.",
        first_gen_note="Paid apprenticeships and co-ops let you earn while you study in this field.",
    ),
    CareerPathway(
        major_keywords=(
            "computer science",
            "software engineering",
            "software development",
            "programming",
            "information technology",
            "cybersecurity",
            "data science",
            "computer information",
        ),
        field_title="Computer Science & Software Engineering",
        field_description=(
            "Software engineers, data scientists and cybersecurity professionals are among the "
            "highest-paid and fastest-growing careers, with strong remote work options."
        ),
        careers=(
            CareerOption("Software Developer", "15-1252", 70_000, 127_000, 200_000, "much_faster", 25, "bachelors",
                         "Design and build software applications."),
            CareerOption("IT Support Specialist", "15-1232", 38_000, 57_000, 86_000, "average", 5, "associates",
                         "Entry-level IT role achievable with an A.A.S. or industry certifications."),
            CareerOption("Cybersecurity Analyst", "15-1212", 65_000, 112_000, 174_000, "much_faster", 32, "bachelors",
                         "Protect organizations from digital attacks."),
            CareerOption("Data Analyst", "15-2051", 55_000, 95_000, 150_000, "much_faster", 35, "bachelors",
                         "Analyze data to help organizations make better decisions."),
        ),
        transfer_tip="Community college A.S. programs in computer science usually articulate into state university CS majors.",
        first_gen_note="Start building projects and applying for internships after your second year.",
    ),
    CareerPathway(
        major_keywords=(
            "nursing",
            "healthcare",
            "medical",
            "health science",
            "radiology",
            "dental hygiene",
            "physical therapy",
        ),
        field_title="Healthcare & Nursing",
        field_description=(
            "Healthcare is the fastest-growing job sector in the U.S., with strong wages and job "
            "security for nurses, technologists and allied health professionals."
        ),
        careers=(
            CareerOption("Registered Nurse (RN)", "29-1141", 60_000, 81_000, 120_000, "faster", 6, "associates",
                         "Provide patient care. An A.D.N. qualifies you for RN licensure."),
            CareerOption("Medical and Clinical Lab Technologist", "29-2011", 48_000, 60_000, 80_000, "faster", 7, "bachelors",
                         "Perform laboratory tests that help diagnose diseases."),
            CareerOption("Radiologic Technologist", "29-2034", 48_000, 67_000, 94_000, "faster", 6, "associates",
                         "Operate imaging equipment for patient diagnosis."),
        ),
        transfer_tip="RN-to-BSN bridge programs let you keep working while you finish a bachelor's degree.",
        first_gen_note="Hospitals often pay for your B.S.N. after you are hired as an RN.",
    ),
    CareerPathway(
        major_keywords=(
            "business",
            "business administration",
            "entrepreneurship",
            "management",
            "marketing",
            "accounting",
            "finance",
            "economics",
        ),
        field_title="Business Administration & Management",
        field_description=(
            "Business degrees open doors across every industry. Accounting, finance and marketing "
            "offer the strongest starting salaries."
        ),
        careers=(
            CareerOption("Financial Analyst", "13-2051", 55_000, 96_000, 166_000, "faster", 9, "bachelors",
                         "Analyze financial data to guide investment and business decisions."),
            CareerOption("Accountant", "13-2011", 48_000, 78_000, 128_000, "average", 4, "bachelors",
                         "Prepare and examine financial records. CPA certification raises earning potential."),
            CareerOption("Marketing Specialist", "13-1161", 40_000, 68_000, 120_000, "faster", 8, "bachelors",
                         "Develop and implement marketing campaigns and strategies."),
        ),
        transfer_tip="Community college A.A. programs in business transfer cleanly to most state universities.",
        first_gen_note="Accounting or finance gives the most predictable path to a middle-class income.",
    ),
)


def find_pathway_for_major(intended_major: str | None) -> CareerPathway | None:
    """First pathway whose keyword contains, or is contained in, the lower-cased major."""
    if not intended_major or not intended_major.strip():
        return None

    major = intended_major.lower()
    for pathway in CAREER_PATHWAYS:
        if any(keyword in major or major in keyword for keyword in pathway.major_keywords):
            return pathway
    return None
