import os
from pathlib import Path
from typing import List, Tuple

import pandas as pd

from shortlist.models.response import ShortlistRow

CSV_COLUMNS = [
    "Rank", "Candidate", "Recommend", "Score", "Years", "Recent Title",
    "Education", "Matches", "Gaps", "Chars", "Notes",
]


def rows_to_frame(rows: List[ShortlistRow]) -> pd.DataFrame:
    ranked = sorted(rows, key=lambda r: r.score, reverse=True)
    data = [{
        "Rank": i,
        "Candidate": r.filename,
        "Recommend": "Yes" if r.recommend else "No",
        "Score": f"{r.score * 100:.1f}%",
        "Years": r.years,
        "Recent Title": r.recent_title,
        "Education": r.education,
        "Matches": "; ".join(r.matches),
        "Gaps": "; ".join(r.gaps),
        "Chars": r.char_count,
        "Notes": r.notes,
    } for i, r in enumerate(ranked, start=1)]
    return pd.DataFrame(data, columns=CSV_COLUMNS)


def shortlist_csv(rows: List[ShortlistRow]) -> str:
    return rows_to_frame(rows).to_csv(index=False)


def shortlist_markdown(jd_id: str, rows: List[ShortlistRow], must_terms: List[str], top: int = 10) -> str:
    df = rows_to_frame(rows)
    md_lines = [f"# {jd_id}: Top Matches"]
    if must_terms:
        md_lines.append(f"**Must-have terms**: {', '.join(must_terms)}\n")
    else:
        md_lines.append("*(No must-have terms found in the JD)*\n")

    if len(df):
        md_lines += [
            "| Rank | Candidate | Recommend | Score | Years | Education | Gaps |",
            "|---:|---|---|---:|---|---|---|",
        ]
        for r in df.head(top).itertuples(index=False):
            md_lines.append(
                f"| {r.Rank} | {r.Candidate} | {r.Recommend} | {r.Score} | {r.Years} | {r.Education} | {r.Gaps} |"
            )
    else:
        md_lines.append("> No resumes were scored.\n")
    return "\n".join(md_lines)


def write_reports(jd_id: str, rows: List[ShortlistRow], must_terms: List[str], report_dir: str) -> Tuple[str, str]:
    Path(report_dir).mkdir(parents=True, exist_ok=True)

    csv_path = os.path.join(report_dir, f"{jd_id}_shortlist.csv")
    Path(csv_path).write_text(shortlist_csv(rows), encoding="utf-8")

    md_path = os.path.join(report_dir, f"{jd_id}_top.md")
    Path(md_path).write_text(shortlist_markdown(jd_id, rows, must_terms), encoding="utf-8")
    return csv_path, md_path
