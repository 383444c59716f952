from .fuzzy_select import FuzzyItem, fuzzy_select
