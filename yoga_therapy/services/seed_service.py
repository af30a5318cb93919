import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.catalog import Posture, TherapyType

logger = logging.getLogger("yoga_therapy")

DEFAULT_THERAPY_TYPES = [
    {
        "name": "Ansiedad",
        "description": "Terapia de yoga para reducir la ansiedad y promover la relajación",
        "target_condition": "anxiety",
    },
    {
        "name": "Artritis",
        "description": "Yoga suave para mejorar la movilidad articular",
        "target_condition": "arthritis",
    },
    {
        "name": "Dolor de Espalda",
        "description": "Fortalecimiento y estiramiento para aliviar el dolor de espalda",
        "target_condition": "back_pain",
    },
]

# keyed by target_condition of the therapy type they belong to
DEFAULT_POSTURES = {
    "anxiety": [
        {
            "sanskrit_name": "Balasana",
            "spanish_name": "Postura del Niño",
            "image_url": "https://images.unsplash.com/photo-1506126613408-eca07ce68773?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=300",
            "instructions": "Siéntate sobre los talones, inclínate hacia adelante con los brazos extendidos. Respira profundamente.",
            "benefits": "Calma la mente, reduce el estrés, estira la espalda baja",
            "modifications": "Coloca una almohada bajo las rodillas si hay molestias",
            "duration": 180,
        },
        {
            "sanskrit_name": "Padmasana",
            "spanish_name": "Postura del Loto",
            "image_url": "https://images.unsplash.com/photo-1591228127791-8e2eaef098d3?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=300",
            "instructions": "Siéntate con las piernas cruzadas, mantén la columna erecta, manos sobre las rodillas.",
            "benefits": "Mejora la concentración, calma la mente, fortalece la postura",
            "modifications": "Usa un cojín bajo las caderas para mayor comodidad",
            "duration": 300,
        },
    ],
    "arthritis": [
        {
            "sanskrit_name": "Marjaryasana",
            "spanish_name": "Postura del Gato",
            "image_url": "https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=300",
            "instructions": "En cuatro patas, alterna entre arquear y redondear la espalda suavemente.",
            "benefits": "Mejora la flexibilidad espinal, fortalece el core",
            "modifications": "Realiza movimientos más pequeños si hay rigidez",
            "duration": 120,
        },
    ],
    "back_pain": [
        {
            "sanskrit_name": "Adho Mukha Svanasana",
            "spanish_name": "Perro boca abajo",
            "image_url": "https://images.unsplash.com/photo-1588286840104-8957b019727f?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=300",
            "instructions": "Desde cuatro patas, levanta las caderas hacia arriba formando una V invertida.",
            "benefits": "Fortalece brazos y piernas, estira la columna vertebral",
            "modifications": "Flexiona las rodillas si hay tensión en las piernas",
            "duration": 90,
        },
    ],
}


async def ensure_default_catalog(db: AsyncSession):
    """Seed therapy types and postures if the catalog is empty."""
    result = await db.execute(select(TherapyType).limit(1))
    if result.scalar_one_or_none() is not None:
        return

    types = [TherapyType(**data) for data in DEFAULT_THERAPY_TYPES]
    db.add_all(types)
    await db.flush()

    by_condition = {t.target_condition: t.id for t in types}
    count = 0
    for condition, postures in DEFAULT_POSTURES.items():
        for data in postures:
            db.add(Posture(therapy_type_ids=[by_condition[condition]], **data))
            count += 1
    await db.commit()
    logger.info(f"Seeded {len(types)} therapy types and {count} postures")
