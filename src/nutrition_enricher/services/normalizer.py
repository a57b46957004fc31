"""Canonicalization of free-text food terms via a static translation table."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

PORTUGUESE_TO_ENGLISH: dict[str, str] = {
    "arroz": "rice",
    "feijão": "beans",
    "feijao": "beans",
    "frango": "chicken",
    "carne": "beef",
    "porco": "pork",
    "peixe": "fish",
    "camarão": "shrimp",
    "camarao": "shrimp",
    "batata": "potato",
    "batatas": "potatoes",
    "batata frita": "french fries",
    "batatas fritas": "french fries",
    "salada": "salad",
    "pão": "bread",
    "pao": "bread",
    "queijo": "cheese",
    "leite": "milk",
    "ovos": "eggs",
    "ovo": "egg",
    "macarrão": "pasta",
    "macarrao": "pasta",
    "espaguete": "spaghetti",
    "lasanha": "lasagna",
    "sopa": "soup",
    "suco": "juice",
    "refrigerante": "soda",
    "coca": "coke",
    "cerveja": "beer",
    "vinho": "wine",
    "água": "water",
    "agua": "water",
    "café": "coffee",
    "cafe": "coffee",
    "chá": "tea",
    "cha": "tea",
    "maçã": "apple",
    "maca": "apple",
    "banana": "banana",
    "laranja": "orange",
    "uva": "grape",
    "morango": "strawberry",
    "morangos": "strawberries",
    "abacaxi": "pineapple",
    "manga": "mango",
    "abacate": "avocado",
    "tomate": "tomato",
    "cebola": "onion",
    "alho": "garlic",
    "cenoura": "carrot",
    "cenouras": "carrots",
    "brócolis": "broccoli",
    "brocolis": "broccoli",
    "espinafre": "spinach",
    "alface": "lettuce",
    "pepino": "cucumber",
    "azeite": "olive oil",
    "manteiga": "butter",
    "creme": "cream",
    "iogurte": "yogurt",
    "presunto": "ham",
    "salsicha": "sausage",
    "linguiça": "sausage",
    "linguica": "sausage",
    "bacon": "bacon",
    "mortadela": "bologna",
    "salame": "salami",
    "pepperoni": "pepperoni",
    "calabresa": "calabrese",
    "mussarela": "mozzarella",
    "parmesão": "parmesan",
    "parmesao": "parmesan",
    "gorgonzola": "gorgonzola",
    "provolone": "provolone",
    "ricota": "ricotta",
    "cottage": "cottage cheese",
    "farofa": "cassava flour",
    "mandioca": "cassava",
    "aipim": "cassava",
    "inhame": "yam",
    "batata doce": "sweet potato",
    "batata-doce": "sweet potato",
    "milho": "corn",
    "ervilha": "pea",
    "ervilhas": "peas",
    "lentilha": "lentil",
    "lentilhas": "lentils",
    "grão de bico": "chickpea",
    "grao de bico": "chickpea",
    "grãos de bico": "chickpeas",
    "graos de bico": "chickpeas",
    "quinoa": "quinoa",
    "aveia": "oatmeal",
    "granola": "granola",
    "cereal": "cereal",
    "pão de queijo": "cheese bread",
    "pao de queijo": "cheese bread",
    "coxinha": "chicken croquette",
    "pastel": "pastry",
    "empada": "pie",
    "esfiha": "meat pie",
    "kibe": "kibbeh",
    "quibe": "kibbeh",
    "acarajé": "black eyed pea fritter",
    "acaraje": "black eyed pea fritter",
    "moqueca": "fish stew",
    "vatapá": "shrimp stew",
    "vatapa": "shrimp stew",
    "caruru": "okra stew",
    "bobó": "cassava stew",
    "bobo": "cassava stew",
    "feijoada": "black bean stew",
    "churrasco": "barbecue",
    "churrascaria": "barbecue restaurant",
    "rodízio": "all you can eat",
    "rodizio": "all you can eat",
    "self service": "buffet",
    "self-service": "buffet",
    "prato feito": "plate lunch",
    "prato-feito": "plate lunch",
    "marmita": "packed lunch",
    "quentinha": "packed lunch",
    "lanche": "snack",
    "sobremesa": "dessert",
    "doce": "sweet",
    "bolo": "cake",
    "torta": "pie",
    "pudim": "pudding",
    "sorvete": "ice cream",
    "chocolate": "chocolate",
    "bombom": "chocolate bonbon",
    "brigadeiro": "chocolate truffle",
    "beijinho": "coconut truffle",
    "quindim": "coconut custard",
    "cocada": "coconut candy",
    "paçoca": "peanut candy",
    "pacoca": "peanut candy",
    "rapadura": "brown sugar",
    "açúcar": "sugar",
    "acucar": "sugar",
    "mel": "honey",
    "geleia": "jam",
    "geleia de morango": "strawberry jam",
    "geleia de morangos": "strawberry jam",
    "manteiga de amendoim": "peanut butter",
    "pasta de amendoim": "peanut butter",
    "creme de avelã": "hazelnut spread",
    "creme de avela": "hazelnut spread",
    "nutella": "nutella",
    "goiabada": "guava paste",
    "doce de leite": "dulce de leche",
    "doce de leite condensado": "condensed milk",
    "leite condensado": "condensed milk",
    "creme de leite": "heavy cream",
    "nata": "cream",
    "queijo ralado": "grated cheese",
    "queijo parmesão": "parmesan cheese",
    "queijo parmesao": "parmesan cheese",
    "queijo mussarela": "mozzarella cheese",
    "queijo gorgonzola": "gorgonzola cheese",
    "queijo provolone": "provolone cheese",
    "queijo ricota": "ricotta cheese",
    "queijo cottage": "cottage cheese",
    "queijo minas": "minas cheese",
    "queijo coalho": "coalho cheese",
    "queijo canastra": "canastra cheese",
    "queijo do reino": "king cheese",
    "queijo prato": "prato cheese",
    "queijo branco": "white cheese",
    "queijo amarelo": "yellow cheese",
    "queijo fresco": "fresh cheese",
    "queijo curado": "aged cheese",
    "queijo maturado": "aged cheese",
    "queijo defumado": "smoked cheese",
    "queijo fundido": "melted cheese",
    "queijo derretido": "melted cheese",
    "queijo em pedaços": "cheese chunks",
    "queijo em pedacos": "cheese chunks",
    "queijo em fatias": "sliced cheese",
    "queijo em cubos": "cubed cheese",
    "queijo em tiras": "cheese strips",
    "queijo em pó": "powdered cheese",
    "queijo em po": "powdered cheese",
    "queijo em creme": "cream cheese",
    "queijo em pasta": "cheese spread",
    "queijo em barra": "cheese bar",
    "queijo em rolo": "cheese roll",
    "queijo em bola": "cheese ball",
    "queijo em cone": "cheese cone",
    "queijo em tubo": "cheese tube",
    "queijo em lata": "canned cheese",
    "queijo em vidro": "jarred cheese",
    "queijo em sachê": "cheese packet",
    "queijo em sache": "cheese packet",
    "queijo em envelope": "cheese envelope",
    "queijo em blister": "cheese blister",
    "queijo em bandeja": "cheese tray",
    "queijo em caixa": "cheese box",
    "queijo em saco": "cheese bag",
    "queijo em pote": "cheese pot",
    "queijo em copo": "cheese cup",
    "queijo em tigela": "cheese bowl",
    "queijo em prato": "cheese plate",
    "queijo em taça": "cheese glass",
    "queijo em xícara": "cheese cup",
    "queijo em xicara": "cheese cup",
    "queijo em colher": "cheese spoon",
    "queijo em garfo": "cheese fork",
    "queijo em faca": "cheese knife",
    "queijo em palito": "cheese stick",
    "queijo em cubinho": "cheese cube",
    "queijo em fatia": "cheese slice",
    "queijo em pedaço": "cheese piece",
    "queijo em pedaco": "cheese piece",
    "queijo em tira": "cheese strip",
    "pizza": "pizza",
    "pizza calabresa": "calabrese pizza",
    "pizza margherita": "margherita pizza",
    "pizza pepperoni": "pepperoni pizza",
    "pizza 4 queijos": "4 cheese pizza",
    "pizza 4 queijo": "4 cheese pizza",
    "pizza quatro queijos": "4 cheese pizza",
    "pizza quatro queijo": "4 cheese pizza",
    "pizza de calabresa": "calabrese pizza",
    "pizza de margherita": "margherita pizza",
    "pizza de pepperoni": "pepperoni pizza",
    "pizza de 4 queijos": "4 cheese pizza",
    "pizza de 4 queijo": "4 cheese pizza",
    "pizza de quatro queijos": "4 cheese pizza",
    "pizza de quatro queijo": "4 cheese pizza",
}


def _longest_first(table: Mapping[str, str]) -> Mapping[str, str]:
    ordered = sorted(table.items(), key=lambda pair: len(pair[0]), reverse=True)
    return MappingProxyType({key.lower(): value for key, value in ordered})


@dataclass(frozen=True)
class TermNormalizer:
    """Maps food terms to canonical English search terms.

    The table is frozen at construction. Terms that already are canonical are
    returned as-is. Keys are tried longest first so a phrase such as
    ``"batata doce"`` wins over its prefix ``"batata"``.
    """

    table: Mapping[str, str] = field(
        default_factory=lambda: _longest_first(PORTUGUESE_TO_ENGLISH)
    )

    canonical_terms: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        canonical = frozenset(value.lower() for value in self.table.values())
        object.__setattr__(self, "canonical_terms", canonical)

    @classmethod
    def from_mapping(cls, table: Mapping[str, str]) -> "TermNormalizer":
        """Build a normalizer over a custom translation table."""
        return cls(table=_longest_first(table))

    def normalize(self, term: str) -> str:
        """Return the canonical form of ``term``, or ``term`` unchanged."""
        lowered = term.strip().lower()
        if not lowered or lowered in self.canonical_terms:
            return term
        for source, canonical in self.table.items():
            if source in lowered:
                return canonical
        for source, canonical in self.table.items():
            if lowered in source:
                return canonical
        return term

    def variants(self, term: str) -> list[str]:
        """Lower-cased term followed by its normalized form, without repeats."""
        variants: list[str] = []
        for candidate in (term, self.normalize(term)):
            lowered = candidate.strip().lower()
            if lowered and lowered not in variants:
                variants.append(lowered)
        return variants
