#!/usr/bin/env python3
"""Profile pipehtml to find performance bottlenecks."""

import cProfile
import io
import pstats

from pipehtml import PipeHTML, parse_bytes

# Sample HTML; only the body is repeated since a document has a single root
section = """
    <div class="container">
        <!-- section -->
        <p>Paragraph 1<p>Paragraph 2
        <ul><li>one<li>two<li>three</ul>
        <table>
            <tr><td>Cell 1<td>Cell 2
            <tr><td>Cell 3<td>Cell 4
        </table>
        <img src="a.png" alt=picture><br>
        <script>if (a < b) { document.write("<p>"); }</script>
    </div>
"""
html = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Test</title></head>
<body>
{section * 100}
</body>
</html>
"""
data = html.encode("utf-8")

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(5):
    result = PipeHTML(html)
    _ = result.root
    _ = parse_bytes(data).result

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
