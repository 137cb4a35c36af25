from trie_knn.classifier import build_classifier, classify_features, Params
from trie_knn.trace_utils import Trace, build_vote_table, render_vote_text


# rows = load_training_rows("train.csv")  # see trie_knn.get_data

training = [
    ("TEST", 1),
    ("TENT", 2),
    ("TOST", 1),
    ("TEXT", 2),
    ("TENTS", 2),
    ("BEST", 1),
]
knn = build_classifier(training)

for line in knn.ascii_lines():
    print(line)


# --- structured result demo ---
params = Params()  # defaults: single best match, overlap scoring


def run_vote(
    features: str, *, params_override: Params | None = None, title: str | None = None
) -> None:
    if title:
        print(f"\n=== {title} ===\n")
    trace = Trace(enabled=True)

    result = classify_features(features, knn, params_override or params, trace=trace)
    print(result)
    print()
    print(render_vote_text(build_vote_table(trace.events)))


# Case 1: best match, earlier candidate wins a tie
run_vote("TAST", title="Best match: TEST and TOST tie at 3")

print("\n" + "-" * 80 + "\n")

# Case 2: k-best, evictions visible in the table
run_vote("TAST", params_override=Params(k=2), title="k=2: two best neighbours vote")

print("\n" + "-" * 80 + "\n")

# Case 3: nothing of the same length
run_vote("TASTIER", title="No same-length neighbours: default label")
