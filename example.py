"""Example usage of the typed_hashmap library."""

import warnings

from typed_hashmap import Hashmap, LengthMismatchWarning, option_context

# Kinds are inferred from the first key and value vectors: text => integer
scores = Hashmap(["Alice", "Bob", "Charlie"], [30, 25, 35])
print(scores)
print()

# Vectorized updates and lookups
scores.set_values(["Bob", "Diana"], [26, 28])
print("Lookup:", scores.find_values(["Alice", "Bob", "Eve"]))
print("Has Eve:", scores.has_key("Eve"))
print("Size:", scores.size())
print()

# Integral floats are accepted for integer values; fractional ones are not
scores["Eve"] = 22.0
print("Eve:", scores["Eve"])

# Mismatched vectors are truncated to the shorter one
with warnings.catch_warnings(record=True) as caught:
    warnings.simplefilter("always", LengthMismatchWarning)
    scores.set_values(["Frank", "Grace", "Henry"], [45, 30])
for warning in caught:
    print("Warning:", warning.message)
print()

# Float values report absent keys as NaN
ratios = Hashmap([1, 2, 3], [0.5, 0.25, 0.125])
print("Ratios:", ratios.find_values([1, 4]))
ratios.rehash(256)
print("Buckets after rehash:", ratios.bucket_count())
print()

with option_context(max_print=3):
    print(scores)
print()

print("All entries:")
for name, age in scores.data().items():
    print(f"  {name}: {age}")

scores.close()
