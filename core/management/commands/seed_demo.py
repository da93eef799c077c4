"""
Seed demo users, forum categories, pharmacies and testimonials.

Idempotent: users and categories are matched by username / slug,
pharmacies and testimonials are only inserted into empty tables.
Everything goes through the storage layer, so passwords are hashed the
same way registration hashes them.
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from core.services.accounts import register_user
from core.storage import build_storage

DEMO_PASSWORD = 'test123'

USERS = [
    dict(username='testuser', email='test@example.com', full_name='Test User', user_type='patient'),
    dict(username='dr_rossi', email='marco.rossi@hospital.it', full_name='Dr. Marco Rossi',
         user_type='professional', specialization='oncologia-medica', hospital='Ospedale San Raffaele',
         available_for_second_opinion=True),
    dict(username='dr_bianchi', email='anna.bianchi@hospital.it', full_name='Dr.ssa Anna Bianchi',
         user_type='professional', specialization='radioterapia', hospital='Istituto Europeo di Oncologia'),
    dict(username='farmacia1', email='farmacia@centrale.it', full_name='Farmacia Centrale',
         user_type='pharmacy', pharmacy_name='Farmacia Centrale'),
    dict(username='farmacia2', email='info@farmaciasanpaolo.it', full_name='Farmacia San Paolo',
         user_type='pharmacy', pharmacy_name='Farmacia San Paolo'),
]

CATEGORIES = [
    ('Tumore al seno', 'breast-cancer', 'Discussioni riguardanti il tumore al seno'),
    ('Tumore al polmone', 'lung-cancer', 'Discussioni riguardanti il tumore al polmone'),
    ('Leucemia', 'leukemia', 'Discussioni riguardanti la leucemia'),
    ('Terapie e trattamenti', 'therapies-treatments', 'Discussioni su diverse terapie e trattamenti'),
    ('Supporto emotivo', 'emotional-support', 'Supporto emotivo per pazienti e familiari'),
]

PHARMACIES = [
    dict(name='Farmacia San Paolo', address='Via Roma 123', city='Milano', region='Lombardia',
         phone='02 1234567', specializations=['preparazioni-galeniche', 'nutrizione-oncologica'],
         rating=4, latitude=45.4642, longitude=9.1900),
    dict(name='Farmacia Centrale', address='Corso Italia 45', city='Roma', region='Lazio',
         phone='06 9876543', specializations=['supporto-post-chemioterapia', 'presidi-medico-chirurgici'],
         rating=5, latitude=41.9028, longitude=12.4964),
    dict(name='Farmacia Moderna', address='Via Napoli 78', city='Napoli', region='Campania',
         phone='081 5557777',
         specializations=['preparazioni-galeniche', 'nutrizione-oncologica', 'presidi-medico-chirurgici'],
         rating=3, latitude=40.8518, longitude=14.2681),
]

TESTIMONIALS = [
    dict(name='Luisa Bianchi', role='Paziente', location='Milano', rating=5,
         content='Grazie a Onconet24 ho potuto ricevere un secondo parere che ha cambiato il mio percorso terapeutico.'),
    dict(name='Dr. Andrea Conti', role='Oncologo', location='Torino', rating=5,
         content='La piattaforma mi permette di offrire consulenze anche a persone che vivono lontano.'),
    dict(name='Giovanni Russo', role='Familiare di paziente', location='Firenze', rating=4,
         content='Il forum ci ha messo in contatto con altre famiglie nella nostra situazione.'),
]


class Command(BaseCommand):
    help = "Seed demo users, forum categories, pharmacies and testimonials (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--backend', default=None,
                            help='storage backend to seed (defaults to STORAGE_BACKEND)')

    def handle(self, *args, **opts):
        backend = opts.get('backend') or settings.STORAGE_BACKEND
        if backend == 'memory':
            self.stdout.write(self.style.WARNING(
                'memory backend: seeded data only lives for the duration of this command'))
        storage = build_storage(backend)

        for account in USERS:
            if storage.get_user_by_username(account['username']):
                self.stdout.write(f"exists: {account['username']}")
                continue
            register_user(storage, {**account, 'password': DEMO_PASSWORD}, verified=True)
            self.stdout.write(self.style.SUCCESS(f"ok: {account['username']} ({account['user_type']})"))

        for name, slug, description in CATEGORIES:
            if storage.get_forum_category_by_slug(slug) is None:
                storage.create_forum_category({'name': name, 'slug': slug, 'description': description})

        if not storage.list_pharmacies():
            for data in PHARMACIES:
                storage.create_pharmacy(data)

        if not storage.list_testimonials():
            for data in TESTIMONIALS:
                storage.create_testimonial(data)

        self.stdout.write(self.style.SUCCESS(f"Demo data seeded ({storage.name} backend)."))
