from calmtype.services.common import Owner
from calmtype.services.correction import AutoCorrector, Correction, local_correction

__all__ = ["Owner", "AutoCorrector", "Correction", "local_correction"]
