"""Curated articles returned when every source fails and nothing is stored."""

from datetime import datetime
from typing import List, Optional

from .models import ARTICLE_EXPIRATION_DAYS, Article

CURATED_ARTICLES = [
    {
        "title": "Patient Blood Management Program Implementation",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC11296688",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "Current scientific evidence supports the effectiveness of PBM by reducing the need for blood transfusions, decreasing associated complications, and improving patient outcomes.",
        "publication_date": "2024",
    },
    {
        "title": "WHO Guidance on Implementing Patient Blood Management",
        "url": "https://www.who.int/publications/i/item/9789240104662",
        "source": "who.int",
        "snippet": "Shows how the necessary structures and processes can be replicated to improve population health through implementation of Patient Blood Management at national and institutional levels.",
        "publication_date": "2024",
    },
    {
        "title": "Cardiac Surgery and Blood-Saving Techniques: An Update",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC8844256",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "Blood conservation strategies in cardiac surgery include low CPB prime, retrograde autologous priming, cell salvage techniques, and pharmacological agents to minimize transfusion requirements.",
        "publication_date": "2022",
    },
    {
        "title": "Outcomes of Cardiac Surgery in Jehovah's Witness Patients: A Review",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC8446884",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "A bloodless protocol for Jehovah's Witnesses does not appear to significantly impact clinical outcomes when compared to non-Witness patients.",
        "publication_date": "2021",
    },
    {
        "title": "Alternatives to Blood Transfusion",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC9666052",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "Strategies that enable patients to minimise or avoid blood transfusions include cell salvage, hemostatic agents, and comprehensive anemia management protocols.",
        "publication_date": "2022",
    },
    {
        "title": "Bloodless Heart Transplantation: An 11-Year Case Series",
        "url": "https://pubmed.ncbi.nlm.nih.gov/40935286",
        "source": "pubmed.ncbi.nlm.nih.gov",
        "snippet": "Bloodless heart transplantation can be performed safely with outcomes comparable to national standards when comprehensive perioperative optimization is employed.",
        "publication_date": "2025",
    },
    {
        "title": "Management of Anemia in Patients Who Decline Blood Transfusion",
        "url": "https://pubmed.ncbi.nlm.nih.gov/30033541",
        "source": "pubmed.ncbi.nlm.nih.gov",
        "snippet": "Under Bloodless Medicine programs, patients with extremely low hemoglobin levels have survived without receiving allogeneic transfusions.",
        "publication_date": "2018",
    },
    {
        "title": "The Advantages of Bloodless Cardiac Surgery: A Systematic Review",
        "url": "https://www.sciencedirect.com/science/article/pii/S0146280623004954",
        "source": "sciencedirect.com",
        "snippet": "Bloodless cardiac surgery is safe with early outcomes similar between Jehovah's Witness and other patients; optimal patient blood management is essential.",
        "publication_date": "2023",
    },
    {
        "title": "Strategies for Blood Conservation in Pediatric Cardiac Surgery",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC5070332",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "Modified ultrafiltration increases hematocrit, improves hemostasis, decreases blood loss and significantly reduces transfusion requirements in children.",
        "publication_date": "2016",
    },
    {
        "title": "Intraoperative Cell Salvage as an Alternative to Allogeneic Transfusion",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC7784599",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "Intraoperative cell salvage provides high-quality autologous red cells and can reduce requirements for allogeneic transfusions along with associated risks and costs.",
        "publication_date": "2020",
    },
    {
        "title": "Patient Blood Management - AABB",
        "url": "https://www.aabb.org/blood-biotherapies/blood/transfusion-medicine/patient-blood-management",
        "source": "aabb.org",
        "snippet": "PBM techniques are designed to ensure optimal patient outcomes while maintaining blood supply availability for those who need it most.",
        "publication_date": "2024",
    },
    {
        "title": "Simplified International Recommendations for PBM Implementation",
        "url": "https://pmc.ncbi.nlm.nih.gov/articles/PMC5356305",
        "source": "pmc.ncbi.nlm.nih.gov",
        "snippet": "PBM metrics should include the proportion of anemic patients who receive treatment, use of blood conservation techniques, and use of hemostatic agents.",
        "publication_date": "2017",
    },
]


def curated_articles(
    now: Optional[datetime] = None,
    expiration_days: int = ARTICLE_EXPIRATION_DAYS,
) -> List[Article]:
    """Fresh Article instances for the curated list."""
    return [
        Article.create(now=now, expiration_days=expiration_days, **entry)
        for entry in CURATED_ARTICLES
    ]
