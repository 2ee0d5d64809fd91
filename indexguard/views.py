"""Django views exposing the indexing engine.

The sitemap only lists pages that pass both indexing stages, robots.txt
advertises it, and a staff-only endpoint returns a sampled index health
report as JSON.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.urls import reverse
from django.views.decorators.http import require_GET

from . import conf
from .engine.index import run_audit
from .engine.sitemap import build_sitemap_entries


def _base_url(request: HttpRequest) -> str:
    return conf.get_base_url() or f"{request.scheme}://{request.get_host()}"


@require_GET
def robots_txt(request: HttpRequest) -> HttpResponse:
    """Serve a robots.txt that advertises the sitemap."""

    sitemap_url = request.build_absolute_uri(reverse('indexguard:sitemap_xml'))
    content = (
        "User-agent: *\n"
        "Allow: /\n"
        f"Sitemap: {sitemap_url}\n"
    )
    return HttpResponse(content, content_type='text/plain')


@require_GET
def sitemap_xml(request: HttpRequest) -> HttpResponse:
    """List indexable airport and route pages with role-based priorities."""

    entries = build_sitemap_entries(conf.get_catalog(), _base_url(request), conf.get_engine_config())
    lines = [
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>",
        "<urlset xmlns=\"http://www.sitemaps.org/schemas/sitemap/0.9\">",
    ]
    for entry in entries:
        lines.extend([
            "  <url>",
            f"    <loc>{escape(entry.loc)}</loc>",
            "    <changefreq>weekly</changefreq>",
            f"    <priority>{entry.priority:.1f}</priority>",
            "  </url>",
        ])
    lines.append("</urlset>")
    return HttpResponse('\n'.join(lines), content_type='application/xml')


@require_GET
def index_health(request: HttpRequest) -> HttpResponse:
    """Run a sampled index health audit for staff users."""

    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated or not user.is_staff:
        return JsonResponse({'detail': 'Staff access required.'}, status=403)

    sample = request.GET.get('sample')
    sample_size = None
    if sample:
        try:
            sample_size = int(sample)
        except ValueError:
            return JsonResponse({'detail': 'sample must be a positive integer.'}, status=400)
        if sample_size < 1:
            return JsonResponse({'detail': 'sample must be a positive integer.'}, status=400)

    report = run_audit(
        conf.get_catalog(),
        sample_size,
        config=conf.get_engine_config(),
        base_url=_base_url(request),
        max_workers=getattr(settings, 'INDEXGUARD_AUDIT_WORKERS', None),
        deadline=getattr(settings, 'INDEXGUARD_AUDIT_DEADLINE', None),
    )
    return JsonResponse(report.as_dict())
