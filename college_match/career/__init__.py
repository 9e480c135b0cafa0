from college_match.career.pathways import CAREER_PATHWAYS, CareerPathway, find_pathway_for_major
from college_match.career.wages import WageData, collect_wage_data, fetch_occupation_wages

__all__ = [
    "CAREER_PATHWAYS",
    "CareerPathway",
    "WageData",
    "collect_wage_data",
    "fetch_occupation_wages",
    "find_pathway_for_major",
]
