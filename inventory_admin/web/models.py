from django.db import models


class Banner(models.Model):
    """Storefront hero banner"""
    title = models.CharField(max_length=200)
    link_url = models.CharField(max_length=500, blank=True)
    image = models.ImageField(upload_to='banners/')
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    class Meta:
        db_table = 'banners'
        ordering = ['sort_order', '-created_at']


def default_social_media():
    return {'facebook': '', 'twitter': '', 'instagram': '', 'linkedin': '', 'youtube': ''}


class CompanySettings(models.Model):
    """Single row of public company details"""
    company_name = models.CharField(max_length=200)
    tagline = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True)
    website = models.CharField(max_length=255, blank=True)
    map_iframe = models.TextField(blank=True)
    social_media = models.JSONField(default=default_social_media, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.company_name

    @classmethod
    def load(cls):
        return cls.objects.order_by('id').first()

    class Meta:
        db_table = 'company_settings'
        verbose_name_plural = 'company settings'


class Policy(models.Model):
    """Legal/store policy page; one row per policy type"""
    POLICY_TYPES = {
        'privacy': {'title': 'Privacy Policy', 'slug': 'privacy-policy'},
        'terms': {'title': 'Terms & Conditions', 'slug': 'terms-conditions'},
        'returns': {'title': 'Returns & Refunds Policy', 'slug': 'returns-refunds'},
        'shipping': {'title': 'Shipping Policy', 'slug': 'shipping-policy'},
        'cookie': {'title': 'Cookie Policy', 'slug': 'cookie-policy'},
    }
    TYPE_CHOICES = [(key, value['title']) for key, value in POLICY_TYPES.items()]

    policy_type = models.CharField(max_length=20, choices=TYPE_CHOICES, unique=True)
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=100, unique=True)
    content = models.TextField()
    is_active = models.BooleanField(default=True)
    is_published = models.BooleanField(default=False)
    version = models.PositiveIntegerField(default=1)
    last_updated = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} (v{self.version})"

    @classmethod
    def default_for(cls, policy_type):
        """Placeholder shown for a policy type that has not been written yet"""
        info = cls.POLICY_TYPES[policy_type]
        return {
            'id': None,
            'policy_type': policy_type,
            'title': info['title'],
            'slug': info['slug'],
            'content': '',
            'is_active': True,
            'is_published': False,
            'version': 1,
            'last_updated': None,
            'created_at': None,
            'updated_at': None,
        }

    class Meta:
        db_table = 'policies'
        verbose_name_plural = 'policies'
        ordering = ['policy_type']


class PageSEO(models.Model):
    """Meta tags for a public storefront page"""
    PUBLIC_PAGES = [
        ('/', 'Home', 'Homepage of the website'),
        ('/about', 'About Us', 'About us page'),
        ('/products', 'Products', 'All products listing page'),
        ('/category', 'Categories', 'All categories listing page'),
        ('/contact', 'Contact Us', 'Contact us page'),
        ('/faq', 'FAQ', 'Frequently asked questions page'),
        ('/privacy', 'Privacy Policy', 'Privacy policy page'),
        ('/terms', 'Terms & Conditions', 'Terms and conditions page'),
        ('/returns', 'Returns Policy', 'Returns and refunds policy page'),
        ('/shipping', 'Shipping Policy', 'Shipping policy page'),
        ('/cookie', 'Cookie Policy', 'Cookie policy page'),
    ]

    page_path = models.CharField(max_length=255, unique=True)
    page_name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    meta_keywords = models.TextField(blank=True)
    og_image = models.ImageField(upload_to='seo/', blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.page_path

    @classmethod
    def normalize_path(cls, path):
        path = (path or '').strip()
        return '/' + path.strip('/') if path.strip('/') else '/'

    @classmethod
    def default_for(cls, page_path):
        for path, name, description in cls.PUBLIC_PAGES:
            if path == page_path:
                return {
                    'id': None,
                    'page_path': path,
                    'page_name': name,
                    'description': description,
                    'meta_title': '',
                    'meta_description': '',
                    'meta_keywords': '',
                    'og_image': None,
                    'is_active': True,
                    'created_at': None,
                    'updated_at': None,
                }
        return None

    class Meta:
        db_table = 'page_seo'
        verbose_name = 'page SEO'
        verbose_name_plural = 'page SEO'
        ordering = ['page_path']


class WebSettings(models.Model):
    """Single row holding the storefront logo and favicon"""
    logo = models.ImageField(upload_to='web-settings/logos/', blank=True, null=True)
    favicon = models.ImageField(upload_to='web-settings/favicons/', blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def load(cls):
        settings = cls.objects.order_by('id').first()
        if settings is None:
            settings = cls.objects.create()
        return settings

    class Meta:
        db_table = 'web_settings'
        verbose_name_plural = 'web settings'
