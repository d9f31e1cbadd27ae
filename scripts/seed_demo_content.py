"""
Seed a demo tenant with advisors, listings, articles, videos, testimonials and FAQs.

Usage:
    python scripts/seed_demo_content.py --create-tables
    python scripts/seed_demo_content.py --slug demo --domain localhost
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table
from sqlalchemy import select

from inmo_api.db.connection import (
    begin_engine_transaction,
    get_async_session_context,
    get_engine,
)
from inmo_api.db.models import (
    FAQ,
    AdvisorProfile,
    Article,
    Base,
    ContentCategory,
    Property,
    Tenant,
    Testimonial,
    User,
    Video,
)
from inmo_api.utils.dates import utcnow
from inmo_api.utils.text import slugify

console = Console()

ADVISORS = [
    ("Juan", "Pérez", "Asesor Senior", ["es", "en"], ["residencial", "lujo"]),
    ("María", "Gómez", "Especialista en Inversión", ["es", "fr"], ["inversion"]),
    ("Carlos", "Santana", "Asesor Comercial", ["es"], ["comercial", "solares"]),
]

PROPERTIES = [
    ("Apartamento en Piantini", "apartamento", "venta", 245000, "Santo Domingo",
     "Piantini", 3, 2),
    ("Penthouse en Naco", "apartamento", "venta", 520000, "Santo Domingo",
     "Naco", 4, 4),
    ("Villa en Punta Cana", "villa", "venta", 890000, "Punta Cana",
     "Cap Cana", 5, 5),
    ("Casa en Arroyo Hondo", "casa", "venta", 375000, "Santo Domingo",
     "Arroyo Hondo", 4, 3),
    ("Local en Bella Vista", "local", "alquiler", 3500, "Santo Domingo",
     "Bella Vista", None, 1),
    ("Apartamento amueblado en Serrallés", "apartamento", "alquiler", 1800,
     "Santo Domingo", "Serrallés", 2, 2),
]

ARTICLES = [
    ("Guía para comprar tu primera vivienda", "guias"),
    ("Cómo invertir en bienes raíces en Punta Cana", "inversion"),
    ("Tendencias del mercado inmobiliario", "mercado"),
]

VIDEOS = [
    ("Recorrido por una villa en Cap Cana", "recorridos", "dQw4w9WgXcQ", 245),
    ("Cómo funciona el fideicomiso inmobiliario", "educativos", "M7lc1UVf-VE", 512),
    ("Vista aérea de Piantini", "recorridos", "ysz5S6PUM-U", 98),
]

TESTIMONIALS = [
    ("Ana Rodríguez", "compradores", "Encontramos la casa perfecta en semanas."),
    ("Luis Martínez", "vendedores", "Vendieron mi apartamento a buen precio."),
    ("Sophie Laurent", "inversionistas", "Un acompañamiento impecable."),
]

FAQS = [
    ("¿Cuánto cuesta el cierre de una compra?", "Entre 3% y 5% del valor.", "compra"),
    ("¿Pueden comprar extranjeros?", "Sí, con los mismos derechos.", "compra"),
    ("¿Cómo publico mi propiedad?", "Contáctanos y un asesor te visita.", "venta"),
]


@click.command()
@click.option("--slug", default="demo", show_default=True, help="Tenant slug.")
@click.option("--name", default="Inmobiliaria Demo", show_default=True)
@click.option("--domain", default="localhost", show_default=True)
@click.option(
    "--create-tables",
    is_flag=True,
    help="Create every table from the ORM metadata before seeding.",
)
def seed_demo_content(slug: str, name: str, domain: str, create_tables: bool) -> None:
    """Populate the configured database with demo content for one tenant."""
    asyncio.run(_seed_async(slug, name, domain, create_tables))


async def _create_tables() -> None:
    async with begin_engine_transaction(get_engine()) as connection:
        await connection.run_sync(Base.metadata.create_all)
    console.print("[green]✓ Tables created[/green]")


async def _seed_async(slug: str, name: str, domain: str, create_tables: bool) -> None:
    if create_tables:
        await _create_tables()

    counts: dict[str, int] = {}
    async with get_async_session_context() as session:
        existing = await session.scalar(select(Tenant).where(Tenant.slug == slug))
        if existing is not None:
            console.print(f"[yellow]Tenant {slug!r} already exists[/yellow]")
            return

        tenant = Tenant(
            slug=slug,
            nombre=name,
            dominio_personalizado=domain,
            configuracion={
                "branding": {"primary_color": "#f04e00", "logo_url": "/logo.svg"},
                "contact": {
                    "phone": "+1 809 555 0100",
                    "whatsapp": "8095550100",
                    "email": f"info@{domain}",
                },
                "info_negocio": {"years_experience": 12},
            },
        )
        session.add(tenant)
        await session.flush()

        profiles: list[AdvisorProfile] = []
        for index, (first, last, title, languages, specialties) in enumerate(ADVISORS):
            user = User(
                nombre=first,
                apellido=last,
                email=f"{slugify(first)}@{domain}",
                telefono=f"+1 809 555 01{index:02d}",
            )
            session.add(user)
            await session.flush()
            profile = AdvisorProfile(
                tenant_id=tenant.id,
                usuario_id=user.id,
                slug=slugify(f"{first} {last}"),
                codigo=f"{first[:3].upper()}-{100 + index}",
                titulo_profesional=title,
                biografia=f"{first} acompaña a compradores e inversionistas.",
                idiomas=languages,
                especialidades=specialties,
                experiencia_anos=5 + index * 3,
                ventas_totales=40 + index * 15,
                destacado=index == 0,
                orden=index,
            )
            session.add(profile)
            profiles.append(profile)
        await session.flush()
        counts["advisors"] = len(profiles)

        for index, row in enumerate(PROPERTIES):
            title, kind, operation, price, city, sector, rooms, baths = row
            advisor = profiles[index % len(profiles)]
            session.add(
                Property(
                    tenant_id=tenant.id,
                    codigo_publico=f"P-{1000 + index}",
                    slug=slugify(title),
                    titulo=title,
                    descripcion=f"{title}, lista para mudarse.",
                    tipo=kind,
                    operacion=operation,
                    precio=price,
                    precio_venta=price if operation == "venta" else None,
                    precio_alquiler=price if operation == "alquiler" else None,
                    moneda="USD",
                    pais="República Dominicana",
                    ciudad=city,
                    sector=sector,
                    ciudad_slug=slugify(city),
                    sector_slug=slugify(sector),
                    categoria_slug=kind,
                    habitaciones=rooms,
                    banos=baths,
                    m2_construccion=80.0 + index * 40,
                    imagen_principal=f"/images/demo/{slugify(title)}.jpg",
                    amenidades=["Piscina", "Gimnasio"] if index % 2 == 0 else [],
                    destacada=index < 4,
                    is_furnished="amueblado" in title,
                    perfil_asesor_id=advisor.id,
                    agente_id=advisor.usuario_id,
                )
            )
        counts["properties"] = len(PROPERTIES)

        categories: dict[str, ContentCategory] = {}
        for order, category_slug in enumerate(sorted({c for _, c in ARTICLES})):
            category = ContentCategory(
                tenant_id=tenant.id,
                slug=category_slug,
                nombre=category_slug.capitalize(),
                orden=order,
            )
            session.add(category)
            categories[category_slug] = category
        await session.flush()

        now = utcnow()
        for index, (title, category_slug) in enumerate(ARTICLES):
            session.add(
                Article(
                    tenant_id=tenant.id,
                    slug=slugify(title),
                    titulo=title,
                    extracto=f"{title}: lo que necesitas saber.",
                    contenido=" ".join(["Contenido de ejemplo."] * 120),
                    categoria_id=categories[category_slug].id,
                    autor_id=profiles[index % len(profiles)].usuario_id,
                    destacado=index == 0,
                    fecha_publicacion=now - timedelta(days=index * 7),
                    tags=[category_slug],
                )
            )
        counts["articles"] = len(ARTICLES)

        video_categories: dict[str, ContentCategory] = {}
        for order, category_slug in enumerate(sorted({c for _, c, _, _ in VIDEOS})):
            category = ContentCategory(
                tenant_id=tenant.id,
                slug=category_slug,
                nombre=category_slug.capitalize(),
                tipo="video",
                orden=order,
            )
            session.add(category)
            video_categories[category_slug] = category
        await session.flush()

        for index, (title, category_slug, youtube_id, seconds) in enumerate(VIDEOS):
            session.add(
                Video(
                    tenant_id=tenant.id,
                    slug=slugify(title),
                    titulo=title,
                    descripcion=f"{title}, presentado por nuestro equipo.",
                    video_url=f"https://www.youtube.com/watch?v={youtube_id}",
                    video_id=youtube_id,
                    duracion_segundos=seconds,
                    categoria_id=video_categories[category_slug].id,
                    destacado=index < 2,
                    orden=index,
                    fecha_publicacion=now - timedelta(days=index * 10),
                )
            )
        counts["videos"] = len(VIDEOS)

        for index, (client, category, body) in enumerate(TESTIMONIALS):
            session.add(
                Testimonial(
                    tenant_id=tenant.id,
                    slug=slugify(client),
                    categoria=category,
                    cliente_nombre=client,
                    cliente_ubicacion="Santo Domingo",
                    titulo=f"Testimonio de {client}",
                    contenido=body,
                    rating=5.0,
                    destacado=index < 2,
                    fecha=now - timedelta(days=index * 30),
                    perfil_asesor_id=profiles[index % len(profiles)].id,
                )
            )
        counts["testimonials"] = len(TESTIMONIALS)

        for order, (question, answer, context) in enumerate(FAQS):
            session.add(
                FAQ(
                    tenant_id=tenant.id,
                    slug=slugify(question),
                    pregunta=question,
                    respuesta=answer,
                    contexto=context,
                    orden=order,
                    destacada=True,
                )
            )
        counts["faqs"] = len(FAQS)

        await session.commit()

    table = Table(title=f"Seeded tenant '{slug}' ({domain})")
    table.add_column("Content", style="cyan")
    table.add_column("Rows", justify="right", style="green")
    for label, count in counts.items():
        table.add_row(label, str(count))
    console.print(table)


if __name__ == "__main__":
    seed_demo_content()
