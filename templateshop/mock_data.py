"""Static catalog used until products are served from the store."""

PRODUCTS = [
    {
        "product_id": "prd-1",
        "slug": "saas-indigo",
        "title": "SaaS Indigo",
        "summary": "Modern SaaS landing template with pricing, features, and FAQ blocks.",
        "category": "landing-pages",
        "tags": ["RTL", "Tailwind", "Next.js", "SEO Ready"],
        "tech": ["Next.js", "React", "Tailwind"],
        "rtl": True,
        "is_bundle": False,
        "base_price_usd": {"personal": 39, "commercial": 89},
        "is_new": True,
        "is_best_seller": True,
    },
    {
        "product_id": "prd-2",
        "slug": "commerce-lite",
        "title": "Commerce Lite",
        "summary": "Minimal ecommerce UI kit with category, search, and checkout pages.",
        "category": "ecommerce-ui",
        "tags": ["Ecommerce", "Tailwind"],
        "tech": ["React", "Tailwind"],
        "rtl": False,
        "is_bundle": False,
        "base_price_usd": {"personal": 49, "commercial": 119},
        "is_new": False,
        "is_best_seller": True,
    },
    {
        "product_id": "prd-3",
        "slug": "admin-pulse",
        "title": "Admin Pulse",
        "summary": "Analytics dashboard with role-based sections and dark mode.",
        "category": "admin-dashboards",
        "tags": ["Dashboard", "Charts", "RTL"],
        "tech": ["Vue", "Tailwind"],
        "rtl": True,
        "is_bundle": False,
        "base_price_usd": {"personal": 59, "commercial": 149},
        "is_new": True,
        "is_best_seller": False,
    },
    {
        "product_id": "prd-4",
        "slug": "folio-mono",
        "title": "Folio Mono",
        "summary": "Clean personal portfolio for freelancers and creators.",
        "category": "portfolio-resume",
        "tags": ["Portfolio", "Minimal"],
        "tech": ["HTML", "CSS"],
        "rtl": False,
        "is_bundle": False,
        "base_price_usd": {"personal": 19, "commercial": 45},
        "is_new": False,
        "is_best_seller": False,
    },
    {
        "product_id": "prd-5",
        "slug": "startup-bundle",
        "title": "Startup Bundle",
        "summary": "Landing, dashboard and commerce templates in one package.",
        "category": "landing-pages",
        "tags": ["Bundle", "RTL"],
        "tech": ["Next.js", "React", "Vue", "Tailwind"],
        "rtl": True,
        "is_bundle": True,
        "base_price_usd": {"personal": 129, "commercial": 299},
        "is_new": True,
        "is_best_seller": True,
    },
    {
        "product_id": "prd-6",
        "slug": "corporate-slate",
        "title": "Corporate Slate",
        "summary": "Agency and firm website, draft for the next release.",
        "category": "corporate-business",
        "tags": ["Business"],
        "tech": ["Next.js", "Tailwind"],
        "rtl": False,
        "is_bundle": False,
        "status": "draft",
        "base_price_usd": {"personal": 35, "commercial": 79},
        "is_new": False,
        "is_best_seller": False,
    },
]
