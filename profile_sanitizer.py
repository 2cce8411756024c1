#!/usr/bin/env python3
"""Profile sanitizedom to find performance bottlenecks."""

import cProfile
import io
import pstats

from sanitizedom import Document, ProcessingOptions, process_markup

# Sample HTML
html = """
<div class="container main">
    <h1 id="title">Heading</h1>
    <p>Paragraph <b>bold</b> <b>more bold</b> <i>italic</i></p>
    <p style="color:red">Paragraph <span class="note">with a span</span></p>
    <script>alert(1)</script>
    <table>
        <tr><td>Cell 1</td><td>Cell 2</td></tr>
        <tr><td>Cell 3</td><td>Cell 4</td></tr>
    </table>
</div>
""" * 100  # Repeat for more meaningful results

options = ProcessingOptions(
    allow_tags_deep={".*": ["DIV", "P", "H[1-6]", "B", "I", "TABLE", "TR", "TD"]},
    allow_attributes_by_tag={"H[1-6]": "id"},
    allow_classes_by_tag={"DIV": "container"},
    join_siblings=["B"],
    remove_empty=True,
)

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = process_markup(Document(), html, options)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
