"""Export utilities for generated patent documents.

Supports plain text, self-contained HTML and JSON output.  Rendering is a
pure function of the document (and optional recording metadata), so the
same inputs always produce the same bytes.
"""

from __future__ import annotations

import html
import io
import json
from datetime import datetime
from pathlib import Path

from patent_pipeline.domain.entities import PatentDocument
from patent_pipeline.domain.values import BlockchainRecord
from patent_pipeline.infrastructure.serialization import document_to_dict, record_to_dict

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def _stamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT).strip()


def _footer() -> str:
    from patent_pipeline import __version__

    return f"Generated by patent-pipeline {__version__}"


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def render_text(document: PatentDocument, record: BlockchainRecord | None = None) -> str:
    """Render *document* as a plain-text application."""
    lines = [
        "PATENT APPLICATION DOCUMENT",
        "===========================",
        "",
        f"Patent ID: {document.document_id}",
        f"Title: {document.idea.title}",
        f"Inventor: {document.idea.submitter_name}",
        f"Filed: {_stamp(document.created_at)}",
    ]
    if record is not None:
        lines.append(f"Blockchain Hash: {record.document_hash}")
        lines.append(f"Transaction: {record.transaction_hash}")
        lines.append(f"Block: #{record.block_number}")
    lines += [
        "",
        document.abstract,
        "",
        f"PATENT CLAIMS ({len(document.claims)}):",
        *document.claims,
        "",
        document.detailed_description,
        "",
        "DRAWINGS:",
        document.drawings_description,
        "",
        document.patentability_analysis,
        "",
        document.inventorship_statement,
        "",
        "RECOMMENDED NEXT STEPS:",
        *(f"{i}. {step}" for i, step in enumerate(document.next_steps, start=1)),
        "",
        "---",
        _footer(),
    ]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Patent: {title}</title>
<style>
  body {{ font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; }}
  .header {{ border-bottom: 2px solid #333; padding-bottom: 20px; margin-bottom: 30px; }}
  .section {{ margin-bottom: 30px; }}
  .section h2 {{ color: #333; border-bottom: 1px solid #ccc; padding-bottom: 10px; }}
  .claims li {{ margin-bottom: 10px; list-style: none; }}
  .blockchain {{ background: #f0f8ff; padding: 15px; border-radius: 5px; }}
  pre {{ white-space: pre-wrap; font-family: inherit; }}
  .footer {{ margin-top: 50px; padding-top: 20px; border-top: 1px solid #ccc;
             text-align: center; color: #666; }}
</style>
</head>
<body>
  <div class="header">
    <h1>{title}</h1>
    <p><strong>Patent ID:</strong> {document_id}</p>
    <p><strong>Inventor:</strong> {inventor}</p>
    <p><strong>Filed:</strong> {filed}</p>
{recorded}  </div>

  <div class="section">
    <h2>Abstract</h2>
    <pre>{abstract}</pre>
  </div>

  <div class="section">
    <h2>Patent Claims ({claim_count})</h2>
    <ol class="claims">
{claims}    </ol>
  </div>

  <div class="section">
    <h2>Detailed Description</h2>
    <pre>{description}</pre>
  </div>

  <div class="section">
    <h2>Drawings</h2>
    <p>{drawings}</p>
  </div>

  <div class="section">
    <h2>Patentability Analysis</h2>
    <pre>{analysis}</pre>
  </div>

  <div class="section">
    <h2>Inventorship Statement</h2>
    <pre>{inventorship}</pre>
  </div>

  <div class="section">
    <h2>Recommended Next Steps</h2>
    <ol>
{next_steps}    </ol>
  </div>
{blockchain}
  <div class="footer">{footer}</div>
</body>
</html>
"""


def render_html(document: PatentDocument, record: BlockchainRecord | None = None) -> str:
    """Render *document* as a self-contained HTML page.

    Every interpolated value is HTML-escaped.
    """
    esc = html.escape

    claims_buf = io.StringIO()
    for claim in document.claims:
        claims_buf.write(f"      <li>{esc(claim)}</li>\n")

    steps_buf = io.StringIO()
    for step in document.next_steps:
        steps_buf.write(f"      <li>{esc(step)}</li>\n")

    recorded = ""
    blockchain = ""
    if record is not None:
        recorded = (
            f"    <p><strong>Blockchain Recorded:</strong> "
            f"{esc(_stamp(record.recorded_at))}</p>\n"
        )
        blockchain = (
            '\n  <div class="section blockchain">\n'
            "    <h2>Blockchain Verification</h2>\n"
            f"    <p><strong>Hash:</strong> {esc(record.document_hash)}</p>\n"
            f"    <p><strong>Transaction:</strong> {esc(record.transaction_hash)}</p>\n"
            f"    <p><strong>Block:</strong> #{record.block_number}</p>\n"
            "  </div>\n"
        )

    return _HTML_TEMPLATE.format(
        title=esc(document.idea.title),
        document_id=esc(document.document_id),
        inventor=esc(document.idea.submitter_name),
        filed=esc(_stamp(document.created_at)),
        recorded=recorded,
        abstract=esc(document.abstract),
        claim_count=len(document.claims),
        claims=claims_buf.getvalue(),
        description=esc(document.detailed_description),
        drawings=esc(document.drawings_description),
        analysis=esc(document.patentability_analysis),
        inventorship=esc(document.inventorship_statement),
        next_steps=steps_buf.getvalue(),
        blockchain=blockchain,
        footer=esc(_footer()),
    )


# ---------------------------------------------------------------------------
# File export
# ---------------------------------------------------------------------------

def _write(path: str | Path, content: str) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(content, encoding="utf-8")
    return out


def export_text(
    document: PatentDocument,
    path: str | Path,
    record: BlockchainRecord | None = None,
) -> Path:
    """Write :func:`render_text` output to *path*."""
    return _write(path, render_text(document, record))


def export_html(
    document: PatentDocument,
    path: str | Path,
    record: BlockchainRecord | None = None,
) -> Path:
    """Write :func:`render_html` output to *path*."""
    return _write(path, render_html(document, record))


def export_json(
    document: PatentDocument,
    path: str | Path,
    record: BlockchainRecord | None = None,
) -> Path:
    """Write the document (and recording metadata) as JSON to *path*."""
    data = document_to_dict(document)
    data["blockchain_record"] = record_to_dict(record) if record is not None else None
    return _write(path, json.dumps(data, indent=2, default=str, ensure_ascii=False))
