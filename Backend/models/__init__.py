from models.medicine import Medicine
from models.dose import Dose

__all__ = ["Medicine", "Dose"]
