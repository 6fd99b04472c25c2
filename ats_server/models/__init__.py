from ats_server.models.ai_artifact import AiArtifact
from ats_server.models.job import Job
from ats_server.models.job_material import JobMaterial
from ats_server.models.profile import Profile
from ats_server.models.skill import Skill

__all__ = [
    "AiArtifact",
    "Job",
    "JobMaterial",
    "Profile",
    "Skill",
]
