"""Static keyword tables for the heuristic fallback analyzer.

Terms are matched as lowercase substrings of subject + body, so short stems
(e.g. "sale") also match longer words ("sales", "wholesale").
"""

from __future__ import annotations

_ENGLISH = (
    "customer", "client", "sale", "purchase", "order", "inquiry", "support",
    "meeting", "project", "deadline", "proposal", "budget", "feedback",
    "issue", "problem", "solution", "opportunity", "partnership", "contract",
    "product", "service", "feature", "development", "testing", "launch",
    "marketing", "campaign", "lead", "conversion", "revenue", "growth",
)

_SPANISH = (
    "cliente", "venta", "compra", "pedido", "consulta", "soporte",
    "reunión", "proyecto", "fecha límite", "propuesta", "presupuesto",
    "problema", "solución", "oportunidad", "sociedad", "contrato",
    "producto", "servicio", "función", "desarrollo", "prueba", "lanzamiento",
    "marketing", "campaña", "cliente potencial", "conversión", "ingresos",
)

_FRENCH = (
    "client", "vente", "achat", "commande", "demande", "support",
    "réunion", "projet", "échéance", "proposition", "budget",
    "problème", "solution", "opportunité", "partenariat", "contrat",
    "produit", "service", "fonctionnalité", "développement", "test", "lancement",
    "marketing", "campagne", "prospect", "conversion", "revenus",
)

_GERMAN = (
    "kunde", "verkauf", "kauf", "bestellung", "anfrage", "support",
    "besprechung", "projekt", "frist", "vorschlag", "budget",
    "problem", "lösung", "gelegenheit", "partnerschaft", "vertrag",
    "produkt", "service", "funktion", "entwicklung", "test", "launch",
    "marketing", "kampagne", "lead", "conversion", "umsatz",
)


def _unique(*groups: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(term for group in groups for term in group))


# Shared terms ("support", "budget", "marketing", ...) appear once.
BUSINESS_KEYWORDS: tuple[str, ...] = _unique(_ENGLISH, _SPANISH, _FRENCH, _GERMAN)

URGENT_SIGNALS = ("issue", "problem", "deadline", "urgent", "critical")
VALUE_SIGNALS = ("opportunity", "revenue", "customer", "client")

POSITIVE_SIGNALS = ("opportunity", "growth", "success", "achievement", "launch", "sale")
NEGATIVE_SIGNALS = ("problem", "issue", "complaint", "delay", "cancel")

TOPIC_DESCRIPTIONS = {
    "customer": "{count} customer-related communications require attention",
    "project": "{count} project updates indicate active development work",
    "meeting": "{count} meeting requests suggest coordination needs",
    "support": "{count} support inquiries may need follow-up",
    "sale": "{count} sales activities show business pipeline activity",
    "feedback": "{count} feedback items provide improvement opportunities",
}
GENERIC_DESCRIPTION = "{count} communications about {keyword} - review for actionable items"

TEST_MARKER = "[test]"
