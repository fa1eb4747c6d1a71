from seedcopy.wizard.machine import reduce
from seedcopy.wizard.session import WizardSession
from seedcopy.wizard.state import TAG_CATALOG, WizardState, WizardStep, WizardUser

__all__ = ["TAG_CATALOG", "WizardSession", "WizardState", "WizardStep", "WizardUser", "reduce"]
