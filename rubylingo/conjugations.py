"""
Form normalization for RubyLingo.

Reverses verb and adjective inflections to recover a dictionary form,
so that 食べました can be looked up as 食べる and 高かった as 高い.

The rules form one declarative table of (suffix, replacement) pairs,
generated from the godan/ichidan/adjective conjugation tables below and
tried longest suffix first. The first rule whose suffix matches (with a
non-empty stem left over) wins. Suru-verb rules only accept a noun stem
(two or more kanji, or katakana), so 勉強しました reduces to 勉強 while
話します still reduces to 話す. A small table of irregular words is
checked before the rules and short-circuits them.

Conjugation Types:
    NON_PAST     - dictionary / polite non-past (~ます)
    PAST         - ~た / ~ました
    CONJUNCTIVE  - ~て form
    PROGRESSIVE  - ~ている and contractions
    CONDITIONAL  - ~たら
    ALTERNATIVE  - ~たり
    PROVISIONAL  - ~ば
    VOLITIONAL   - ~う / ~よう / ~ましょう
    DESIDERATIVE - ~たい
    ADVERBIAL    - adjective ~く
    APPEARANCE   - adjective ~そう
    COPULA       - noun + です / だ
    SURU         - noun + する
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from rubylingo.characters import test_word


# ============================================================================
# Conjugation Type Constants
# ============================================================================

class ConjType(IntEnum):
    """Conjugation types recognized by the normalizer."""
    NON_PAST = 1
    PAST = 2
    CONJUNCTIVE = 3
    PROVISIONAL = 4
    VOLITIONAL = 9
    CONDITIONAL = 11
    ALTERNATIVE = 12
    ADVERBIAL = 50
    DESIDERATIVE = 55
    PROGRESSIVE = 60
    APPEARANCE = 61
    COPULA = 70
    SURU = 71
    IRREGULAR = 99


CONJ_DESCRIPTIONS = {
    ConjType.NON_PAST: "Non-past",
    ConjType.PAST: "Past (~ta)",
    ConjType.CONJUNCTIVE: "Conjunctive (~te)",
    ConjType.PROVISIONAL: "Provisional (~eba)",
    ConjType.VOLITIONAL: "Volitional",
    ConjType.CONDITIONAL: "Conditional (~tara)",
    ConjType.ALTERNATIVE: "Alternative (~tari)",
    ConjType.ADVERBIAL: "Adverbial (~ku)",
    ConjType.DESIDERATIVE: "Desiderative (~tai)",
    ConjType.PROGRESSIVE: "Progressive (~te iru)",
    ConjType.APPEARANCE: "Appearance (~sou)",
    ConjType.COPULA: "Copula (~desu)",
    ConjType.SURU: "Suru verb",
    ConjType.IRREGULAR: "Irregular",
}


def get_conj_description(conj_type: int) -> str:
    """Get human-readable description of conjugation type."""
    return CONJ_DESCRIPTIONS.get(conj_type, f"Type {conj_type}")


# ============================================================================
# Rule Definition
# ============================================================================

@dataclass(frozen=True)
class SuffixRule:
    """
    A single normalization rule.

    Attributes:
        suffix: Inflected ending to match.
        replacement: Ending that restores the dictionary form.
        conj_type: Conjugation the suffix expresses.
        neg: True for negative forms.
        fml: True for polite (~ます) forms.
        noun_stem: Only match when the stem is a noun (suru verbs).
    """
    suffix: str
    replacement: str
    conj_type: ConjType
    neg: bool = False
    fml: bool = False
    noun_stem: bool = False

    def apply(self, word: str) -> Optional[str]:
        """
        Apply this rule to a word.

        Returns:
            The restored form, or None if the suffix does not match, would
            leave an empty stem, or needs a noun stem the word lacks.
        """
        if len(word) <= len(self.suffix) or not word.endswith(self.suffix):
            return None
        stem = word[:-len(self.suffix)]
        if self.noun_stem and not is_noun_stem(stem):
            return None
        return stem + self.replacement


def is_noun_stem(stem: str) -> bool:
    """A kanji compound (勉強) or a katakana word (テスト)."""
    return (len(stem) >= 2 and test_word(stem, 'kanji')) or test_word(stem, 'katakana')


@dataclass(frozen=True)
class Deconjugation:
    """Outcome of normalizing one word."""
    word: str
    base: str
    conj_type: ConjType
    neg: bool = False
    fml: bool = False
    exception: bool = False

    @property
    def description(self) -> str:
        parts = [get_conj_description(self.conj_type)]
        if self.neg:
            parts.append("negative")
        if self.fml:
            parts.append("formal")
        return ", ".join(parts)


# ============================================================================
# Conjugation Tables
# ============================================================================

# Godan verb endings and their stem rows
# Maps: ending -> (a-row, i-row, u-row, e-row, o-row)
GODAN_STEMS = {
    'う': ('わ', 'い', 'う', 'え', 'お'),
    'く': ('か', 'き', 'く', 'け', 'こ'),
    'ぐ': ('が', 'ぎ', 'ぐ', 'げ', 'ご'),
    'す': ('さ', 'し', 'す', 'せ', 'そ'),
    'つ': ('た', 'ち', 'つ', 'て', 'と'),
    'ぬ': ('な', 'に', 'ぬ', 'ね', 'の'),
    'ぶ': ('ば', 'び', 'ぶ', 'べ', 'ぼ'),
    'む': ('ま', 'み', 'む', 'め', 'も'),
    'る': ('ら', 'り', 'る', 'れ', 'ろ'),
}

# Te-form / ta-form sound changes, in order of preference. Endings that
# share a sound change (う/つ/る -> って, む/ぬ/ぶ -> んで) resolve to the
# first one listed.
GODAN_TE_TA: List[Tuple[str, str, str]] = [
    ('う', 'って', 'った'),
    ('く', 'いて', 'いた'),
    ('ぐ', 'いで', 'いだ'),
    ('す', 'して', 'した'),
    ('む', 'んで', 'んだ'),
    ('つ', 'って', 'った'),
    ('る', 'って', 'った'),
    ('ぬ', 'んで', 'んだ'),
    ('ぶ', 'んで', 'んだ'),
]

# Last kana of an ichidan stem that can only be ichidan (e-row)
ICHIDAN_E_ROW = ('え', 'け', 'げ', 'せ', 'ぜ', 'て', 'で', 'ね', 'へ', 'べ', 'め', 'れ')

# (suffix after the masu stem, conj type, neg, fml)
POLITE_ENDINGS = [
    ('ませんでした', ConjType.PAST, True, True),
    ('ましょう', ConjType.VOLITIONAL, False, True),
    ('ました', ConjType.PAST, False, True),
    ('ません', ConjType.NON_PAST, True, True),
    ('まして', ConjType.CONJUNCTIVE, False, True),
    ('ます', ConjType.NON_PAST, False, True),
]

DESIDERATIVE_ENDINGS = [
    ('たくなかった', ConjType.DESIDERATIVE, True),
    ('たかった', ConjType.DESIDERATIVE, False),
    ('たくない', ConjType.DESIDERATIVE, True),
    ('たい', ConjType.DESIDERATIVE, False),
]

# (suffix after the negative stem, conj type)
NEGATIVE_ENDINGS = [
    ('なかった', ConjType.PAST),
    ('なければ', ConjType.PROVISIONAL),
    ('なくて', ConjType.CONJUNCTIVE),
    ('ない', ConjType.NON_PAST),
]

# Auxiliaries that follow the te-form for continuing actions
PROGRESSIVE_AUX = [
    ('いました', False, True),
    ('います', False, True),
    ('いない', True, False),
    ('いる', False, False),
    ('いた', False, False),
    ('る', False, False),
    ('た', False, False),
]

ADJECTIVE_ENDINGS = [
    ('くありませんでした', ConjType.PAST, True, True),
    ('くありません', ConjType.NON_PAST, True, True),
    ('くなかった', ConjType.PAST, True, False),
    ('かったです', ConjType.PAST, False, True),
    ('かった', ConjType.PAST, False, False),
    ('ければ', ConjType.PROVISIONAL, False, False),
    ('くない', ConjType.NON_PAST, True, False),
    ('くて', ConjType.CONJUNCTIVE, False, False),
    ('そう', ConjType.APPEARANCE, False, False),
    ('く', ConjType.ADVERBIAL, False, False),
]

COPULA_ENDINGS = [
    ('ではありません', ConjType.COPULA, True, True),
    ('じゃない', ConjType.COPULA, True, False),
    ('でしょう', ConjType.COPULA, False, True),
    ('である', ConjType.COPULA, False, False),
    ('でした', ConjType.COPULA, False, True),
    ('だった', ConjType.COPULA, False, False),
    ('です', ConjType.COPULA, False, True),
    ('だ', ConjType.COPULA, False, False),
]

# Noun + する, reduced to the bare noun
SURU_ENDINGS = [
    ('しませんでした', ConjType.PAST, True, True),
    ('していました', ConjType.PROGRESSIVE, False, True),
    ('しています', ConjType.PROGRESSIVE, False, True),
    ('しなかった', ConjType.PAST, True, False),
    ('しましょう', ConjType.VOLITIONAL, False, True),
    ('している', ConjType.PROGRESSIVE, False, False),
    ('していた', ConjType.PROGRESSIVE, False, False),
    ('しました', ConjType.PAST, False, True),
    ('しません', ConjType.NON_PAST, True, True),
    ('します', ConjType.NON_PAST, False, True),
    ('しない', ConjType.NON_PAST, True, False),
    ('したい', ConjType.DESIDERATIVE, False, False),
    ('したら', ConjType.CONDITIONAL, False, False),
    ('しよう', ConjType.VOLITIONAL, False, False),
    ('すれば', ConjType.PROVISIONAL, False, False),
    ('して', ConjType.CONJUNCTIVE, False, False),
    ('した', ConjType.PAST, False, False),
]


# ============================================================================
# Rule Generation
# ============================================================================

def generate_suru_rules() -> List[SuffixRule]:
    """Suru-verb forms after a noun stem: 勉強しました -> 勉強."""
    return [
        SuffixRule(suffix, '', conj, neg, fml, noun_stem=True)
        for suffix, conj, neg, fml in SURU_ENDINGS
    ]


def generate_polite_rules() -> List[SuffixRule]:
    """~ます forms and ~たい forms built on the masu stem."""
    rules = []
    for ending, stems in GODAN_STEMS.items():
        i_stem = stems[1]
        for suffix, conj, neg, fml in POLITE_ENDINGS:
            rules.append(SuffixRule(i_stem + suffix, ending, conj, neg, fml))
    for e in ICHIDAN_E_ROW:
        for suffix, conj, neg, fml in POLITE_ENDINGS:
            rules.append(SuffixRule(e + suffix, e + 'る', conj, neg, fml))
    for ending, stems in GODAN_STEMS.items():
        for suffix, conj, neg in DESIDERATIVE_ENDINGS:
            rules.append(SuffixRule(stems[1] + suffix, ending, conj, neg))
    for e in ICHIDAN_E_ROW:
        for suffix, conj, neg in DESIDERATIVE_ENDINGS:
            rules.append(SuffixRule(e + suffix, e + 'る', conj, neg))
    return rules


def generate_negative_rules() -> List[SuffixRule]:
    """Plain negative forms on the godan a-row stem."""
    rules = []
    for ending, stems in GODAN_STEMS.items():
        a_stem = stems[0]
        for suffix, conj in NEGATIVE_ENDINGS:
            rules.append(SuffixRule(a_stem + suffix, ending, conj, neg=True))
        rules.append(SuffixRule(a_stem + 'ず', ending, ConjType.NON_PAST, neg=True))
    return rules


def generate_te_ta_rules() -> List[SuffixRule]:
    """Te/ta forms and everything built on them (~ている, ~たら, ~たり)."""
    forms = GODAN_TE_TA + [('る', 'て', 'た')]
    rules = []
    for ending, te, ta in forms:
        for aux, neg, fml in PROGRESSIVE_AUX:
            rules.append(SuffixRule(te + aux, ending, ConjType.PROGRESSIVE, neg, fml))
        rules.append(SuffixRule(ta + 'ら', ending, ConjType.CONDITIONAL))
        rules.append(SuffixRule(ta + 'り', ending, ConjType.ALTERNATIVE))
        rules.append(SuffixRule(te, ending, ConjType.CONJUNCTIVE))
        rules.append(SuffixRule(ta, ending, ConjType.PAST))
    return rules


def generate_adjective_rules() -> List[SuffixRule]:
    """I-adjective inflections, all restoring the final い."""
    return [
        SuffixRule(suffix, 'い', conj, neg, fml)
        for suffix, conj, neg, fml in ADJECTIVE_ENDINGS
    ]


def generate_mood_rules() -> List[SuffixRule]:
    """Volitional and provisional forms."""
    rules = []
    for ending, stems in GODAN_STEMS.items():
        rules.append(SuffixRule(stems[4] + 'う', ending, ConjType.VOLITIONAL))
        rules.append(SuffixRule(stems[3] + 'ば', ending, ConjType.PROVISIONAL))
    rules.append(SuffixRule('よう', 'る', ConjType.VOLITIONAL))
    return rules


def generate_fallback_rules() -> List[SuffixRule]:
    """
    Endings after a kanji stem, where the stem row is not visible.

    見ました, 寝ない and 見たい are treated as ichidan verbs.
    """
    rules = []
    for suffix, conj, neg, fml in POLITE_ENDINGS:
        rules.append(SuffixRule(suffix, 'る', conj, neg, fml))
    for suffix, conj, neg in DESIDERATIVE_ENDINGS:
        rules.append(SuffixRule(suffix, 'る', conj, neg))
    for suffix, conj in NEGATIVE_ENDINGS:
        rules.append(SuffixRule(suffix, 'る', conj, neg=True))
    return rules


def generate_copula_rules() -> List[SuffixRule]:
    """Noun + copula and noun + する, reduced to the bare noun."""
    rules = [
        SuffixRule(suffix, '', conj, neg, fml)
        for suffix, conj, neg, fml in COPULA_ENDINGS
    ]
    rules.append(SuffixRule('する', '', ConjType.SURU))
    return rules


def build_rule_table() -> List[SuffixRule]:
    """
    Build the full rule table, longest suffix first.

    Families are generated in priority order; when two families produce
    the same suffix, the earlier one is kept. Noun-stem rules are tracked
    separately, so a suru rule and a verb rule can share a suffix. The
    sort is stable, so rules of equal length keep their family order.
    """
    families = [
        generate_suru_rules(),
        generate_polite_rules(),
        generate_negative_rules(),
        generate_adjective_rules(),
        generate_te_ta_rules(),
        generate_mood_rules(),
        generate_fallback_rules(),
        generate_copula_rules(),
    ]
    seen = set()
    rules = []
    for family in families:
        for rule in family:
            key = (rule.suffix, rule.noun_stem)
            if key in seen:
                continue
            seen.add(key)
            rules.append(rule)
    rules.sort(key=lambda r: -len(r.suffix))
    return rules


RULES: List[SuffixRule] = build_rule_table()


def _index_by_suffix(rules: List[SuffixRule]) -> Dict[str, List[SuffixRule]]:
    index: Dict[str, List[SuffixRule]] = {}
    for rule in rules:
        index.setdefault(rule.suffix, []).append(rule)
    return index


_RULES_BY_SUFFIX = _index_by_suffix(RULES)
_MAX_SUFFIX_LENGTH = max(len(rule.suffix) for rule in RULES)


# ============================================================================
# Lexical Exceptions
# ============================================================================

# Irregular verbs and forms the rule table gets wrong. Whole-word matches,
# checked before the rule table.
IRREGULAR_BASES: Dict[str, List[str]] = {
    'する': [
        'します', 'しました', 'しません', 'しませんでした', 'しましょう',
        'して', 'した', 'しない', 'しなかった', 'しよう', 'すれば',
        'している', 'しています', 'していた', 'していました',
    ],
    'くる': ['きます', 'きました', 'きません', 'きて', 'きた', 'こない', 'こなかった', 'こよう'],
    '来る': ['来ます', '来ました', '来ません', '来て', '来た', '来ない', '来なかった'],
    'いる': ['います', 'いました', 'いません', 'いて', 'いた', 'いない', 'いなかった'],
    'ある': ['あります', 'ありました', 'ありません', 'ありませんでした', 'あった', 'あって'],
    'いく': ['いって', 'いった', 'いったら'],
    '行く': ['行って', '行った', '行ったら', '行っています', '行っている'],
    'ござる': ['ございます', 'ございました'],
    'よい': ['よかった', 'よくない', 'よくて', 'よければ', 'よく'],
    '良い': ['良かった', '良くない', '良くて', '良ければ', '良く'],
    'わかる': ['わかった', 'わかって', 'わからない', 'わかります', 'わかりました'],
    '分かる': ['分かった', '分かって', '分からない', '分かります', '分かりました'],
}

EXCEPTIONS: Dict[str, str] = {
    form: base
    for base, forms in IRREGULAR_BASES.items()
    for form in forms
}


# ============================================================================
# Normalization
# ============================================================================

def match_rule(word: str) -> Optional[SuffixRule]:
    """
    Find the rule that applies to a word.

    Equivalent to scanning RULES in order: candidate suffixes are tried
    from the longest possible down to one character, and the first rule
    for a suffix that applies to the word (non-empty stem, noun stem where
    required) wins.
    """
    for length in range(min(_MAX_SUFFIX_LENGTH, len(word) - 1), 0, -1):
        for rule in _RULES_BY_SUFFIX.get(word[-length:], ()):
            if rule.apply(word) is not None:
                return rule
    return None


def deconjugate(word: str) -> Optional[Deconjugation]:
    """
    Recover the dictionary form of an inflected word.

    Args:
        word: Surface form, e.g. '食べました'.

    Returns:
        Deconjugation with the base form and the conjugation that was
        reversed, or None if no exception or rule applies.
    """
    if not word:
        return None

    base = EXCEPTIONS.get(word)
    if base is not None:
        rule = match_rule(word)
        if rule is None:
            return Deconjugation(word, base, ConjType.IRREGULAR, exception=True)
        return Deconjugation(word, base, rule.conj_type, rule.neg, rule.fml, exception=True)

    rule = match_rule(word)
    if rule is None:
        return None
    return Deconjugation(word, rule.apply(word), rule.conj_type, rule.neg, rule.fml)


def normalize(word: str) -> str:
    """
    Normalize a word to its likely dictionary form.

    Never fails: words no rule applies to are returned unchanged.

    >>> normalize('食べました')
    '食べる'
    >>> normalize('高かった')
    '高い'
    """
    result = deconjugate(word)
    return result.base if result is not None else word
