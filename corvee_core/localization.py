from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

DEFAULT_LOCALE = "fr-FR"


MESSAGES: Mapping[str, Mapping[str, str]] = {
    "fr-FR": {
        "person.added": "[OK] Personne ajoutee.",
        "person.updated": "[EDIT] Personne mise a jour.",
        "person.removed": "[DEL] Personne supprimee.",
        "absence.added": "[OK] Absence ajoutee.",
        "absence.removed": "[DEL] Absence supprimee.",
        "task.added": "[OK] Tache ajoutee.",
        "task.updated": "[EDIT] Tache mise a jour.",
        "task.removed": "[DEL] Tache supprimee.",
        "month.selected": "[OK] Mois selectionne: {month}.",
        "assignment.done": "[OK] Taches distribuees ({count} attributions).",
        "assignment.reset": "[DEL] Attributions effacees.",
        "roster.exported": "[SAVE] Effectifs exportes vers {path}.",
        "roster.imported": "[LOAD] Effectifs importes depuis {path}.",
        "undo.applied": "[UNDO] Restauration appliquee ({label}).",
        "undo.empty": "[ERR] Rien a annuler.",
        "person.absent": "{name} absent",
        "empty": "(aucun enregistrement)",
    },
    "en-US": {
        "person.added": "[OK] Person added.",
        "person.updated": "[EDIT] Person updated.",
        "person.removed": "[DEL] Person removed.",
        "absence.added": "[OK] Absence added.",
        "absence.removed": "[DEL] Absence removed.",
        "task.added": "[OK] Task added.",
        "task.updated": "[EDIT] Task updated.",
        "task.removed": "[DEL] Task removed.",
        "month.selected": "[OK] Month selected: {month}.",
        "assignment.done": "[OK] Tasks distributed ({count} assignments).",
        "assignment.reset": "[DEL] Assignments cleared.",
        "roster.exported": "[SAVE] Roster exported to {path}.",
        "roster.imported": "[LOAD] Roster imported from {path}.",
        "undo.applied": "[UNDO] Restore applied ({label}).",
        "undo.empty": "[ERR] Nothing to undo.",
        "person.absent": "{name} absent",
        "empty": "(no records)",
    },
}

# Abbreviated and full names, Monday first, as date-fns renders them.
WEEKDAYS: Mapping[str, Mapping[str, Sequence[str]]] = {
    "fr-FR": {
        "short": ("lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."),
        "long": ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"),
    },
    "en-US": {
        "short": ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
        "long": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    },
}

MONTH_NAMES: Mapping[str, Mapping[str, Sequence[str]]] = {
    "fr-FR": {
        "short": (
            "janv.", "févr.", "mars", "avr.", "mai", "juin",
            "juil.", "août", "sept.", "oct.", "nov.", "déc.",
        ),
        "long": (
            "janvier", "février", "mars", "avril", "mai", "juin",
            "juillet", "août", "septembre", "octobre", "novembre", "décembre",
        ),
    },
    "en-US": {
        "short": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
        "long": (
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ),
    },
}

SUPPORTED_LOCALES: tuple[str, ...] = tuple(MESSAGES)


@dataclass(slots=True)
class Localizer:
    locale: str = DEFAULT_LOCALE

    def text(self, key: str, **kwargs) -> str:
        table = MESSAGES.get(self.locale, MESSAGES[DEFAULT_LOCALE])
        template = table.get(key, key)
        if kwargs:
            return template.format(**kwargs)
        return template

    def weekday(self, index: int, *, long: bool = False) -> str:
        table = WEEKDAYS.get(self.locale, WEEKDAYS[DEFAULT_LOCALE])
        return table["long" if long else "short"][index]

    def month(self, index: int, *, long: bool = False) -> str:
        table = MONTH_NAMES.get(self.locale, MONTH_NAMES[DEFAULT_LOCALE])
        return table["long" if long else "short"][index - 1]
